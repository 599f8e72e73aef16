"""配置管理"""

from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# 加载 .env 文件
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class BrowserConfig(BaseModel):
    """浏览器配置"""

    headless: bool = Field(default_factory=lambda: _env_bool("HEADLESS", "true"))
    viewport_width: int = Field(default_factory=lambda: int(os.getenv("VIEWPORT_WIDTH", "1920")))
    viewport_height: int = Field(default_factory=lambda: int(os.getenv("VIEWPORT_HEIGHT", "1080")))
    timeout_ms: int = Field(default_factory=lambda: int(os.getenv("STEP_TIMEOUT_MS", "30000")))
    browser_type: str = Field(default_factory=lambda: os.getenv("BROWSER_TYPE", "chromium"))
    # 设置后通过 CDP 连接已有浏览器，而不是启动内置浏览器
    cdp_url: str | None = Field(default_factory=lambda: os.getenv("BROWSER_CDP_URL", None))
    executable_path: str | None = Field(
        default_factory=lambda: os.getenv("BROWSER_EXECUTABLE_PATH", None)
    )
    stealth: bool = Field(default_factory=lambda: _env_bool("BROWSER_STEALTH", "true"))
    user_agent: str = Field(
        default_factory=lambda: os.getenv(
            "BROWSER_USER_AGENT",
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/128.0.0.0 Safari/537.36",
        )
    )
    max_launch_retries: int = Field(
        default_factory=lambda: int(os.getenv("BROWSER_MAX_LAUNCH_RETRIES", "2"))
    )


class PaginationDefaults(BaseModel):
    """分页默认参数（单次运行的配置优先）

    所有时间单位均为毫秒。
    """

    # 每轮之间的间隔
    delay_ms: int = Field(default_factory=lambda: int(os.getenv("PAGINATION_DELAY_MS", "1000")))
    # 滚动后的稳定等待
    scroll_delay_ms: int = Field(default_factory=lambda: int(os.getenv("SCROLL_DELAY_MS", "1000")))
    # 点击"加载更多"后的稳定等待
    wait_after_click_ms: int = Field(
        default_factory=lambda: int(os.getenv("WAIT_AFTER_CLICK_MS", "1000"))
    )
    # 加载指示器出现/消失的最长等待
    loading_timeout_ms: int = Field(
        default_factory=lambda: int(os.getenv("LOADING_TIMEOUT_MS", "5000"))
    )
    wait_for_selector_timeout_ms: int = Field(
        default_factory=lambda: int(os.getenv("WAIT_FOR_SELECTOR_TIMEOUT_MS", "5000"))
    )
    network_idle_timeout_ms: int = Field(
        default_factory=lambda: int(os.getenv("NETWORK_IDLE_TIMEOUT_MS", "10000"))
    )
    verbose: bool = Field(default_factory=lambda: _env_bool("PAGINATION_VERBOSE", "false"))


class Config(BaseModel):
    """全局配置"""

    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    pagination: PaginationDefaults = Field(default_factory=PaginationDefaults)

    @classmethod
    def load(cls) -> "Config":
        """加载配置"""
        return cls()


# 全局配置实例
config = Config.load()

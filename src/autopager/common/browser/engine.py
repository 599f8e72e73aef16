"""
异步浏览器引擎

管理一个显式持有的 Browser 实例：由调用方启动与关闭，而不是全局单例。
每次通过 page() 获取的页面都运行在独立的 BrowserContext 中，退出时必定关闭。
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List, Literal, Optional

from loguru import logger
from playwright.async_api import Browser, Page, Playwright, async_playwright
from playwright_stealth import Stealth

from ..config import BrowserConfig, config


class BrowserEngine:
    """
    异步浏览器引擎：
    1. 持有一个 Browser 实例，首次使用时惰性启动。
    2. 支持 CDP 连接已有浏览器，或启动内置浏览器（可选 stealth）。
    3. page() 为每次运行分配隔离的 Context，保证退出时释放。
    """

    def __init__(
        self,
        headless: Optional[bool] = None,
        default_viewport: Optional[Dict[str, int]] = None,
        default_user_agent: Optional[str] = None,
        launch_args: Optional[List[str]] = None,
        browser_type: Optional[Literal["chromium", "firefox", "webkit"]] = None,
        cdp_url: Optional[str] = None,
        executable_path: Optional[str] = None,
        stealth: Optional[bool] = None,
        max_retries: Optional[int] = None,
        default_timeout: Optional[int] = None,
        browser_config: Optional[BrowserConfig] = None,
    ):
        cfg = browser_config or config.browser

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._playwright_context: Optional[Any] = None
        self._lock = asyncio.Lock()

        self.headless = cfg.headless if headless is None else headless
        self.default_viewport = default_viewport or {
            "width": cfg.viewport_width,
            "height": cfg.viewport_height,
        }
        self.default_user_agent = default_user_agent or cfg.user_agent
        self.browser_type = browser_type or cfg.browser_type
        self.cdp_url = cdp_url if cdp_url is not None else cfg.cdp_url
        self.executable_path = executable_path or cfg.executable_path
        self.stealth = cfg.stealth if stealth is None else stealth
        self.max_retries = cfg.max_launch_retries if max_retries is None else max_retries
        self.default_timeout = default_timeout or cfg.timeout_ms

        self.launch_args = launch_args or [
            "--no-sandbox",
            "--disable-setuid-sandbox",
            "--disable-blink-features=AutomationControlled",
            "--disable-infobars",
            "--disable-extensions",
            "--no-first-run",
        ]

    @property
    def is_running(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    async def start(self) -> "BrowserEngine":
        """启动浏览器（已启动则直接返回）"""
        await self._ensure_browser()
        return self

    async def _ensure_browser(self) -> Browser:
        """
        确保 Browser 实例存活且可用

        使用 asyncio.Lock 防止并发运行同时启动多个浏览器；
        启动失败时按 max_retries 重试。
        """
        async with self._lock:
            if self.is_running:
                return self._browser

            if self._browser is not None:
                logger.warning("[Engine] 浏览器连接已断开，重新启动...")
                self._browser = None

            if not self._playwright:
                if self.stealth:
                    self._playwright_context = Stealth().use_async(async_playwright())
                else:
                    self._playwright_context = async_playwright()
                self._playwright = await self._playwright_context.__aenter__()

            launcher = getattr(self._playwright, self.browser_type)

            for attempt in range(self.max_retries + 1):
                try:
                    if self.cdp_url:
                        logger.debug(f"[Engine] 通过 CDP 连接浏览器: {self.cdp_url}")
                        self._browser = await launcher.connect_over_cdp(self.cdp_url)
                    else:
                        logger.debug(f"[Engine] 启动内置浏览器: {self.browser_type}")
                        self._browser = await launcher.launch(
                            headless=self.headless,
                            args=self.launch_args,
                            executable_path=self.executable_path,
                        )
                    break
                except Exception as e:
                    if attempt == self.max_retries:
                        raise
                    logger.warning(
                        f"[Engine] 浏览器启动失败 ({attempt + 1}/{self.max_retries + 1}): {e}"
                    )

            return self._browser

    @asynccontextmanager
    async def page(
        self,
        timeout: Optional[int] = None,
        **context_kwargs: Any,
    ) -> AsyncGenerator[Page, None]:
        """
        获取一个运行在独立 Context 中的 Page 对象。

        Args:
            timeout: 页面默认超时（毫秒）
            **context_kwargs: 传递给 browser.new_context 的其他参数（值为 None 的会被忽略）
        """
        browser = await self._ensure_browser()

        options: Dict[str, Any] = {
            "viewport": self.default_viewport,
            "user_agent": self.default_user_agent,
        }
        options.update({k: v for k, v in context_kwargs.items() if v is not None})

        context = await browser.new_context(**options)
        try:
            page = await context.new_page()
            page.set_default_timeout(timeout or self.default_timeout)
            try:
                yield page
            finally:
                await page.close()
        finally:
            await context.close()

    async def close(self) -> None:
        """彻底关闭引擎"""
        if self._browser is not None:
            try:
                await self._browser.close()
            finally:
                self._browser = None
        if self._playwright_context is not None:
            await self._playwright_context.__aexit__(None, None, None)
        self._playwright_context = None
        self._playwright = None
        logger.debug("[Engine] 浏览器引擎已关闭")

    async def __aenter__(self) -> "BrowserEngine":
        return await self.start()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

"""文档会话管理

把 "打开一个 URL 得到可交互的页面" 封装为作用域资源：进入时分配独立的
Context 并完成导航，退出时无论成功与否都关闭页面和 Context。
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, AsyncGenerator, Literal

from playwright.async_api import TimeoutError as PlaywrightTimeout
from pydantic import BaseModel, Field

from ..constants import DEFAULT_WAIT_UNTIL
from ..exceptions import ElementNotFoundError, PageLoadError
from ..logger import get_logger

if TYPE_CHECKING:
    from playwright.async_api import Page, Response

    from .engine import BrowserEngine

logger = get_logger(__name__)


class Viewport(BaseModel):
    width: int
    height: int


class ProxySettings(BaseModel):
    server: str
    username: str | None = None
    password: str | None = None
    bypass: str | None = None


class DocumentOptions(BaseModel):
    """打开文档时的导航与 Context 选项"""

    timeout: int | None = Field(default=None, description="导航超时（毫秒）")
    wait_until: Literal["load", "domcontentloaded", "networkidle", "commit"] = Field(
        default=DEFAULT_WAIT_UNTIL, description="导航完成条件"
    )
    wait_for_selector: str | None = Field(default=None, description="导航后等待出现的选择器")
    wait_for_timeout: int | None = Field(
        default=None, description="等待选择器的超时，或无选择器时的固定等待（毫秒）"
    )
    viewport: Viewport | None = None
    user_agent: str | None = None
    proxy: ProxySettings | None = None
    extra_http_headers: dict[str, str] | None = None
    ignore_https_errors: bool | None = None
    java_script_enabled: bool = True
    bypass_csp: bool | None = None
    locale: str | None = None
    timezone_id: str | None = None
    color_scheme: Literal["light", "dark", "no-preference"] | None = None
    verbose: bool = False

    def context_kwargs(self) -> dict[str, Any]:
        """转换为 browser.new_context 的参数"""
        return {
            "viewport": self.viewport.model_dump() if self.viewport else None,
            "user_agent": self.user_agent,
            "proxy": self.proxy.model_dump(exclude_none=True) if self.proxy else None,
            "extra_http_headers": self.extra_http_headers,
            "ignore_https_errors": self.ignore_https_errors,
            "java_script_enabled": self.java_script_enabled,
            "bypass_csp": self.bypass_csp,
            "locale": self.locale,
            "timezone_id": self.timezone_id,
            "color_scheme": self.color_scheme,
        }


async def navigate(page: "Page", url: str, options: DocumentOptions) -> "Response":
    """导航到 URL 并执行可选的就绪等待

    Raises:
        PageLoadError: 导航没有返回响应
        ElementNotFoundError: 就绪选择器在超时内没有出现
    """
    response = await page.goto(url, timeout=options.timeout, wait_until=options.wait_until)
    if response is None:
        raise PageLoadError(url, "导航未返回响应")

    if options.wait_for_selector:
        try:
            await page.wait_for_selector(
                options.wait_for_selector,
                timeout=options.wait_for_timeout or 5000,
            )
        except PlaywrightTimeout as e:
            raise ElementNotFoundError(options.wait_for_selector, "页面就绪选择器未出现") from e
    elif options.wait_for_timeout:
        await page.wait_for_timeout(options.wait_for_timeout)

    return response


@asynccontextmanager
async def open_document_with_response(
    engine: "BrowserEngine",
    url: str,
    options: DocumentOptions | None = None,
) -> AsyncGenerator[tuple["Page", "Response"], None]:
    """打开文档的上下文管理器，同时返回导航响应"""
    options = options or DocumentOptions()
    if options.verbose:
        logger.info(f"[Document] 打开页面: {url}")

    async with engine.page(timeout=options.timeout, **options.context_kwargs()) as page:
        response = await navigate(page, url, options)
        yield page, response


@asynccontextmanager
async def open_document(
    engine: "BrowserEngine",
    url: str,
    options: DocumentOptions | None = None,
) -> AsyncGenerator["Page", None]:
    """打开文档的上下文管理器

    Example:
        >>> async with open_document(engine, "https://example.com") as page:
        ...     html = await page.content()
    """
    async with open_document_with_response(engine, url, options) as (page, _response):
        yield page

"""
浏览器解析服务

对外的统一入口：持有一个 BrowserEngine，提供页面抓取、指标统计、
页面内求值、结构化提取、截图/PDF 以及分页提取。
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Literal

from pydantic import BaseModel, Field

from .common.browser import BrowserEngine, DocumentOptions, open_document, open_document_with_response
from .common.logger import get_logger
from .common.validators import validate_url
from .extraction import extract_structured_from_html
from .extraction.structured import parse_html
from .pagination import PaginatedExtractionOptions, PaginationController, PaginationResult

if TYPE_CHECKING:
    from playwright.async_api import Page

logger = get_logger(__name__)


class Cookie(BaseModel):
    name: str
    value: str
    domain: str = ""
    path: str = "/"
    expires: float | None = None
    http_only: bool | None = None
    secure: bool | None = None
    same_site: str | None = None


class FetchResponse(BaseModel):
    """页面抓取结果"""

    html: str
    url: str
    status: int
    status_text: str = ""
    headers: dict[str, str] = Field(default_factory=dict)
    cookies: list[Cookie] = Field(default_factory=list)
    load_time_ms: float = 0.0


class ResourceCounts(BaseModel):
    total: int = 0
    images: int = 0
    stylesheets: int = 0
    scripts: int = 0
    fonts: int = 0


class PageMetrics(BaseModel):
    """基于 HTML 快照的页面指标"""

    title: str = ""
    description: str | None = None
    keywords: str | None = None
    viewport: dict[str, int] = Field(default_factory=dict)
    user_agent: str = ""
    load_time_ms: float = 0.0
    resource_counts: ResourceCounts = Field(default_factory=ResourceCounts)


class FetchResponseWithMetrics(FetchResponse):
    metrics: PageMetrics


def _first_attr(root, selector: str, attribute: str) -> str | None:
    found = root.cssselect(selector)
    return found[0].get(attribute) if found else None


def extract_page_metrics(html_content: str, viewport: dict[str, int], user_agent: str) -> PageMetrics:
    """从 HTML 快照统计标题、描述与资源数量"""
    root = parse_html(html_content)
    titles = root.cssselect("title")
    return PageMetrics(
        title=titles[0].text_content().strip() if titles else "",
        description=_first_attr(root, 'meta[name="description"]', "content"),
        keywords=_first_attr(root, 'meta[name="keywords"]', "content"),
        viewport=viewport,
        user_agent=user_agent,
        resource_counts=ResourceCounts(
            total=sum(1 for _ in root.iter()),
            images=len(root.cssselect("img")),
            stylesheets=len(root.cssselect('link[rel="stylesheet"]')),
            scripts=len(root.cssselect("script")),
            fonts=len(root.cssselect('link[rel="font"], style')),
        ),
    )


class BrowserParser:
    """
    浏览器解析服务

    Example:
        >>> async with BrowserParser() as parser:
        ...     response = await parser.fetch_html("https://example.com")
        ...     print(response.status, len(response.html))
    """

    def __init__(self, engine: BrowserEngine | None = None, close_engine: bool | None = None):
        self.engine = engine or BrowserEngine()
        # 默认只关闭自己创建的引擎
        self._owns_engine = engine is None if close_engine is None else close_engine

    async def __aenter__(self) -> "BrowserParser":
        await self.engine.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._owns_engine:
            await self.engine.close()

    async def fetch_html(self, url: str, options: DocumentOptions | None = None) -> FetchResponse:
        """打开页面并返回渲染后的 HTML 与响应信息"""
        url = validate_url(url)
        start = time.perf_counter()

        async with open_document_with_response(self.engine, url, options) as (page, response):
            html_content = await page.content()
            cookies = await page.context.cookies()
            load_time_ms = (time.perf_counter() - start) * 1000

            logger.debug(f"[Parser] 抓取完成: {url} ({load_time_ms:.0f}ms)")
            return FetchResponse(
                html=html_content,
                url=response.url,
                status=response.status,
                status_text=response.status_text,
                headers=dict(response.headers),
                cookies=[
                    Cookie(
                        name=c["name"],
                        value=c["value"],
                        domain=c.get("domain", ""),
                        path=c.get("path", "/"),
                        expires=c.get("expires"),
                        http_only=c.get("httpOnly"),
                        secure=c.get("secure"),
                        same_site=c.get("sameSite"),
                    )
                    for c in cookies
                ],
                load_time_ms=load_time_ms,
            )

    async def fetch_html_with_metrics(
        self, url: str, options: DocumentOptions | None = None
    ) -> FetchResponseWithMetrics:
        response = await self.fetch_html(url, options)
        viewport = (
            options.viewport.model_dump()
            if options and options.viewport
            else dict(self.engine.default_viewport)
        )
        user_agent = (options.user_agent if options else None) or self.engine.default_user_agent

        metrics = extract_page_metrics(response.html, viewport, user_agent)
        metrics.load_time_ms = response.load_time_ms
        return FetchResponseWithMetrics(**response.model_dump(), metrics=metrics)

    async def evaluate_on_page(
        self,
        url: str,
        script: str | Callable[["Page"], Awaitable[Any]],
        options: DocumentOptions | None = None,
    ) -> Any:
        """在页面内执行 JS 表达式或调用方的异步函数

        出错时记录日志并返回 None。
        """
        url = validate_url(url)
        try:
            async with open_document(self.engine, url, options) as page:
                if isinstance(script, str):
                    return await page.evaluate(script)
                return await script(page)
        except Exception as e:
            logger.error(f"[Parser] 页面求值失败: {url} - {e}")
            return None

    async def extract_structured(
        self,
        url: str,
        schema: dict[str, Any],
        options: DocumentOptions | None = None,
    ) -> dict[str, Any]:
        """抓取页面后按字段规则提取一条记录"""
        response = await self.fetch_html(url, options)
        verbose = bool(options and options.verbose)
        return extract_structured_from_html(response.html, schema, verbose=verbose)

    async def take_screenshot(
        self,
        url: str,
        path: str | None = None,
        full_page: bool = False,
        image_type: Literal["png", "jpeg"] = "png",
        quality: int | None = None,
        clip: dict[str, float] | None = None,
        options: DocumentOptions | None = None,
    ) -> bytes:
        url = validate_url(url)
        async with open_document(self.engine, url, options) as page:
            return await page.screenshot(
                path=path,
                full_page=full_page,
                type=image_type,
                quality=quality if image_type == "jpeg" else None,
                clip=clip,
            )

    async def generate_pdf(
        self,
        url: str,
        path: str | None = None,
        paper_format: str | None = None,
        print_background: bool | None = None,
        margin: dict[str, str] | None = None,
        options: DocumentOptions | None = None,
    ) -> bytes:
        """导出页面 PDF（仅 Chromium 无头模式支持）"""
        url = validate_url(url)
        async with open_document(self.engine, url, options) as page:
            return await page.pdf(
                path=path,
                format=paper_format,
                print_background=print_background,
                margin=margin,
            )

    async def extract_with_pagination(
        self,
        url: str,
        options: PaginatedExtractionOptions,
        document_options: DocumentOptions | None = None,
    ) -> PaginationResult:
        """按分页策略逐轮揭示内容并累积条目

        Raises:
            URLValidationError: URL 无效
            PageLoadError: 页面无法打开（result 为错误状态的结果）
        """
        url = validate_url(url)
        controller = PaginationController(
            lambda target: open_document(self.engine, target, document_options)
        )
        return await controller.run(
            url,
            options.pagination,
            options.extract_items,
            is_duplicate=options.is_duplicate,
            include_duplicates=options.include_duplicates,
            event_handlers=options.event_handlers,
        )

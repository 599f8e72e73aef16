"""CLI 入口"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .common.browser import BrowserEngine
from .common.exceptions import AutoPagerError, URLValidationError, ValidationError
from .common.logger import setup_file_logging
from .common.validators import validate_url
from .extraction import FieldRule, coerce_schema, make_item_extractor
from .parser import BrowserParser
from .pagination import (
    InfiniteScrollConfig,
    LoadMoreButtonConfig,
    NumberedPaginationConfig,
    PaginatedExtractionOptions,
    PaginationResult,
)


app = typer.Typer(
    name="autopager",
    help="AutoPager CLI - 浏览器渲染与分页提取工具",
    add_completion=False,
)
console = Console()

STRATEGIES = ("infinite-scroll", "load-more-button", "numbered-pagination")


@app.callback()
def main_callback(
    log_file: str | None = typer.Option(None, "--log-file", help="同时把日志写入该文件"),
):
    """AutoPager CLI"""
    if log_file:
        setup_file_logging(log_file)


def _load_schema(fields_file: str) -> dict[str, FieldRule]:
    path = Path(fields_file)
    if not path.exists():
        raise ValueError(f"字段定义文件不存在: {fields_file}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"字段定义 JSON 解析失败: {exc}") from exc

    if not isinstance(data, dict) or not data:
        raise ValueError("字段定义必须是非空 JSON 对象 (字段名 -> 规则)")

    try:
        return coerce_schema(data)
    except Exception as exc:
        raise ValueError(f"字段规则无效: {exc}") from exc


def _build_pagination(
    strategy: str,
    button_selector: str | None,
    next_selector: str | None,
    max_pages: int | None,
    max_items: int | None,
    delay: int | None,
    verbose: bool,
):
    common: dict[str, Any] = {
        "max_pages": max_pages,
        "max_items": max_items,
        "delay": delay,
        "verbose": verbose,
    }
    if strategy == "infinite-scroll":
        return InfiniteScrollConfig(**common)
    if strategy == "load-more-button":
        if not button_selector:
            raise ValueError("load-more-button 策略需要 --button-selector")
        return LoadMoreButtonConfig(button_selector=button_selector, **common)
    if strategy == "numbered-pagination":
        if not next_selector:
            raise ValueError("numbered-pagination 策略需要 --next-selector")
        return NumberedPaginationConfig(next_button_selector=next_selector, **common)
    raise ValueError(f"不支持的策略: {strategy}（可选: {', '.join(STRATEGIES)}）")


def _dedup_by(key: str):
    def is_duplicate(item: dict, existing: list[dict]) -> bool:
        value = item.get(key)
        if value is None:
            return False
        return any(other.get(key) == value for other in existing)

    return is_duplicate


def _build_summary_table(result: PaginationResult) -> Table:
    table = Table(title="分页结果", show_header=True, header_style="bold cyan")
    table.add_column("项目", style="cyan")
    table.add_column("值", style="green")
    table.add_row("条目数", str(len(result.items)))
    table.add_row("处理页数", str(result.pages_processed))
    table.add_row("停止原因", result.stop_reason.value)
    table.add_row("是否完成", "是" if result.completed else "否")
    table.add_row("总耗时", f"{result.total_time / 1000:.2f}s")
    table.add_row("平均每页", f"{result.metadata.average_page_time / 1000:.2f}s")
    if result.errors:
        table.add_row("错误", "\n".join(result.errors))
    return table


def _write_json(output: str, payload: Any) -> None:
    path = Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def _input_error(e: Exception) -> typer.Exit:
    console.print(Panel(f"[red]{e}[/red]", title="输入错误", style="red"))
    return typer.Exit(1)


def _run(coro):
    """执行协程，统一处理中断与运行错误"""
    try:
        return asyncio.run(coro)
    except KeyboardInterrupt:
        console.print("\n[yellow]已中断[/yellow]")
        raise typer.Exit(130)
    except AutoPagerError as e:
        console.print(Panel(f"[red]{e}[/red]", title="执行错误", style="red"))
        raise typer.Exit(1)


@app.command("fetch")
def fetch_command(
    url: str = typer.Argument(..., help="目标 URL"),
    output: str | None = typer.Option(None, "--output", "-o", help="保存 HTML 的文件路径"),
    headless: bool = typer.Option(True, "--headless/--no-headless", help="无头模式运行浏览器"),
):
    """抓取渲染后的 HTML。"""
    try:
        url = validate_url(url)
    except URLValidationError as e:
        raise _input_error(e)

    response = _run(_fetch(url, headless))

    if output:
        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(response.html, encoding="utf-8")
        console.print(f"[green]已保存 HTML:[/green] {output} (HTTP {response.status})")
    else:
        console.print(response.html, markup=False, highlight=False)


@app.command("extract")
def extract_command(
    url: str = typer.Argument(..., help="目标 URL"),
    fields_file: str = typer.Option(..., "--fields-file", help="字段规则 JSON 文件"),
    output: str | None = typer.Option(None, "--output", "-o", help="输出 JSON 文件路径"),
    headless: bool = typer.Option(True, "--headless/--no-headless", help="无头模式运行浏览器"),
):
    """按字段规则从单个页面提取一条记录。"""
    try:
        url = validate_url(url)
        schema = _load_schema(fields_file)
    except (ValidationError, ValueError) as e:
        raise _input_error(e)

    record = _run(_extract(url, schema, headless))

    if output:
        _write_json(output, record)
        console.print(f"[green]已保存:[/green] {output}")
    else:
        console.print_json(data=record)


@app.command("paginate")
def paginate_command(
    url: str = typer.Argument(..., help="目标 URL"),
    strategy: str = typer.Option(..., "--strategy", "-s", help=f"分页策略: {', '.join(STRATEGIES)}"),
    item_selector: str = typer.Option(..., "--item-selector", help="条目容器 CSS 选择器"),
    fields_file: str = typer.Option(..., "--fields-file", help="字段规则 JSON 文件"),
    button_selector: str | None = typer.Option(None, "--button-selector", help="加载更多按钮选择器"),
    next_selector: str | None = typer.Option(None, "--next-selector", help="下一页按钮选择器"),
    max_pages: int | None = typer.Option(None, "--max-pages", min=0, help="最大翻页数"),
    max_items: int | None = typer.Option(None, "--max-items", min=0, help="最大条目数"),
    delay: int | None = typer.Option(None, "--delay", min=0, help="轮次间隔（毫秒）"),
    dedup_key: str | None = typer.Option(None, "--dedup-key", help="按该字段去重"),
    output: str | None = typer.Option(None, "--output", "-o", help="输出 JSON 文件路径"),
    headless: bool = typer.Option(True, "--headless/--no-headless", help="无头模式运行浏览器"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出逐轮诊断日志"),
):
    """按分页策略逐轮提取条目。"""
    try:
        url = validate_url(url)
        schema = _load_schema(fields_file)
        pagination = _build_pagination(
            strategy, button_selector, next_selector, max_pages, max_items, delay, verbose
        )
    except (ValidationError, ValueError) as e:
        raise _input_error(e)

    options = PaginatedExtractionOptions(
        pagination=pagination,
        extract_items=make_item_extractor(item_selector, schema, verbose),
        is_duplicate=_dedup_by(dedup_key) if dedup_key else None,
    )

    console.print(
        Panel(
            f"[bold]URL:[/bold] {url}\n"
            f"[bold]策略:[/bold] {strategy}\n"
            f"[bold]条目选择器:[/bold] {item_selector}\n"
            f"[bold]字段数:[/bold] {len(schema)}",
            title="分页提取",
            style="cyan",
        )
    )

    result = _run(_paginate(url, options, headless))
    console.print(_build_summary_table(result))

    if output:
        _write_json(output, result.items)
        console.print(f"[green]已保存 {len(result.items)} 条:[/green] {output}")

    if not result.completed:
        raise typer.Exit(1)


async def _fetch(url: str, headless: bool):
    async with BrowserParser(BrowserEngine(headless=headless), close_engine=True) as parser:
        return await parser.fetch_html(url)


async def _extract(url: str, schema: dict[str, FieldRule], headless: bool):
    async with BrowserParser(BrowserEngine(headless=headless), close_engine=True) as parser:
        return await parser.extract_structured(url, schema)


async def _paginate(url: str, options: PaginatedExtractionOptions, headless: bool):
    async with BrowserParser(BrowserEngine(headless=headless), close_engine=True) as parser:
        return await parser.extract_with_pagination(url, options)


def main():
    """CLI 入口点

    供 pyproject.toml 中 [project.scripts] 调用。
    """
    app()


if __name__ == "__main__":
    main()

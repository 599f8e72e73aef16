"""静态 HTML 结构化提取

基于 lxml 解析 HTML 快照，按字段规则（CSS 经 cssselect 转换，或 XPath）
抽取文本、属性或原始 HTML。单个字段失败只影响该字段，不会中断整条记录。
"""

from __future__ import annotations

from typing import Any

from lxml import html as lxml_html
from lxml.cssselect import CSSSelector
from lxml.etree import _Element

from ..common.exceptions import FieldExtractionError
from ..common.logger import get_extraction_logger, verbose_level
from .models import FieldRule, coerce_schema
from .transforms import normalize_transform

logger = get_extraction_logger()


def parse_html(html_content: str) -> _Element:
    """解析 HTML，整页解析失败时按片段解析"""
    try:
        return lxml_html.fromstring(html_content)
    except Exception:
        return lxml_html.fragment_fromstring(html_content, create_parent="div")


def select(root: _Element, rule: FieldRule) -> list[Any]:
    """按规则选择节点；XPath 可能直接返回字符串结果"""
    if rule.type == "xpath":
        found = root.xpath(rule.selector)
        return found if isinstance(found, list) else [found]
    return CSSSelector(rule.selector)(root)


def _node_value(node: Any, rule: FieldRule) -> str | None:
    if not isinstance(node, _Element):
        text = str(node).strip()
        return text or None
    if rule.raw:
        return lxml_html.tostring(node, encoding="unicode", with_tail=False)
    if rule.attribute:
        return node.get(rule.attribute) or None
    return node.text_content().strip() or None


def extract_field(root: _Element, name: str, rule: FieldRule) -> Any:
    """提取单个字段

    Raises:
        FieldExtractionError: 选择器无效或转换器出错
    """
    try:
        return _extract_value(root, rule)
    except Exception as e:
        raise FieldExtractionError(name, str(e)) from e


def _extract_value(root: _Element, rule: FieldRule) -> Any:
    nodes = select(root, rule)
    transform = normalize_transform(rule.transform)

    if rule.multiple:
        values = [v for v in (_node_value(n, rule) for n in nodes) if v is not None]
        return transform(values) if rule.transform is not None else values

    if not nodes:
        return None
    value = _node_value(nodes[0], rule)
    if value is None or rule.transform is None:
        return value
    return transform(value)


def extract_record(root: _Element, schema: dict[str, FieldRule], verbose: bool = False) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for name, rule in schema.items():
        if rule.type == "evaluate":
            logger.log(verbose_level(verbose), f"[Extraction] 静态模式跳过 evaluate 字段 '{name}'")
            result[name] = rule.empty_value
            continue
        try:
            result[name] = extract_field(root, name, rule)
        except FieldExtractionError as e:
            logger.error(f"[Extraction] {e}")
            result[name] = rule.empty_value
            continue
        logger.log(verbose_level(verbose), f"[Extraction] 字段 '{name}': {result[name]!r}")
    return result


def extract_structured_from_html(
    html_content: str,
    schema: dict[str, Any],
    verbose: bool = False,
) -> dict[str, Any]:
    """按规则从整个 HTML 文档提取一条记录

    Args:
        html_content: HTML 快照
        schema: 字段名 -> FieldRule（或等价 dict）
        verbose: 输出逐字段诊断日志

    Returns:
        字段名 -> 值；单值缺失为 None，多值缺失为 []
    """
    rules = coerce_schema(schema)
    if not html_content:
        return {name: rule.empty_value for name, rule in rules.items()}
    return extract_record(parse_html(html_content), rules, verbose)


def extract_items_from_html(
    html_content: str,
    item_selector: str,
    schema: dict[str, Any],
    verbose: bool = False,
) -> list[dict[str, Any]]:
    """对每个条目容器应用字段规则，得到条目列表

    item_selector 为 CSS 选择器；字段选择器相对于容器求值
    （XPath 需使用 ``.//`` 形式的相对路径）。
    """
    if not html_content:
        return []
    rules = coerce_schema(schema)
    root = parse_html(html_content)
    containers = CSSSelector(item_selector)(root)
    return [extract_record(container, rules, verbose) for container in containers]


def make_item_extractor(item_selector: str, schema: dict[str, Any], verbose: bool = False):
    """构造分页引擎使用的条目提取器 (page, html) -> list[dict]"""
    rules = coerce_schema(schema)

    def extract_items(_page, html_content: str) -> list[dict[str, Any]]:
        return extract_items_from_html(html_content, item_selector, rules, verbose)

    return extract_items

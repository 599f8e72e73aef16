"""输入验证工具

提供 URL、分页参数等用户输入的验证功能。
"""

from __future__ import annotations

import re
from urllib.parse import urlparse

from .constants import MAX_URL_LENGTH, PAGE_NUMBER_PLACEHOLDER, VALID_URL_SCHEMES
from .exceptions import ConfigValidationError, URLValidationError

_PERCENT_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*%\s*$")


def validate_url(url: str, allow_empty: bool = False) -> str:
    """验证并清理 URL

    Args:
        url: 待验证的 URL 字符串
        allow_empty: 是否允许空 URL

    Returns:
        清理后的 URL

    Raises:
        URLValidationError: 当 URL 格式无效时
    """
    url = url.strip() if url else ""

    if not url:
        if allow_empty:
            return ""
        raise URLValidationError("", "URL 不能为空")

    if len(url) > MAX_URL_LENGTH:
        raise URLValidationError(url, f"URL 长度超过 {MAX_URL_LENGTH} 字符")

    try:
        result = urlparse(url)
    except ValueError as e:
        raise URLValidationError(url, f"URL 解析失败: {e}")

    if not result.scheme:
        raise URLValidationError(url, "缺少协议 (http/https)")

    if result.scheme.lower() not in VALID_URL_SCHEMES:
        raise URLValidationError(url, f"不支持的协议: {result.scheme}")

    if not result.netloc and result.scheme.lower() != "file":
        raise URLValidationError(url, "缺少域名")

    return url


def parse_scroll_distance(distance: int | float | str) -> tuple[float, bool]:
    """解析滚动距离

    Args:
        distance: 像素值（如 800）或视口百分比字符串（如 "75%"）

    Returns:
        (数值, 是否为百分比)

    Raises:
        ConfigValidationError: 无法识别的距离格式
    """
    if isinstance(distance, bool):
        raise ConfigValidationError(f"无效的滚动距离: {distance!r}")
    if isinstance(distance, (int, float)):
        if distance <= 0:
            raise ConfigValidationError(f"滚动距离必须为正数: {distance}")
        return float(distance), False

    match = _PERCENT_PATTERN.match(distance)
    if match:
        value = float(match.group(1))
        if value <= 0:
            raise ConfigValidationError(f"滚动百分比必须为正数: {distance}")
        return value, True

    try:
        value = float(distance)
    except ValueError:
        raise ConfigValidationError(f"无效的滚动距离: {distance!r}") from None
    if value <= 0:
        raise ConfigValidationError(f"滚动距离必须为正数: {distance}")
    return value, False


def validate_page_url_pattern(pattern: str) -> str:
    """校验直接页码链接模板，必须包含 {page} 占位符"""
    if PAGE_NUMBER_PLACEHOLDER not in pattern:
        raise ConfigValidationError(
            f"页码链接模板缺少 {PAGE_NUMBER_PLACEHOLDER} 占位符: {pattern}"
        )
    return pattern

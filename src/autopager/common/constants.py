"""常量定义"""

from __future__ import annotations

# URL 校验
MAX_URL_LENGTH = 2048
VALID_URL_SCHEMES = ("http", "https", "file")

# 默认滚动距离（像素）
DEFAULT_SCROLL_PIXELS = 800

# 默认的导航等待条件
DEFAULT_WAIT_UNTIL = "networkidle"

# 直接页码链接中的占位符
PAGE_NUMBER_PLACEHOLDER = "{page}"

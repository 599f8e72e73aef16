"""静态字段提取"""

from .models import ExtractionSchema, FieldRule, coerce_schema
from .structured import (
    extract_items_from_html,
    extract_structured_from_html,
    make_item_extractor,
)
from .transforms import normalize_transform

__all__ = [
    "ExtractionSchema",
    "FieldRule",
    "coerce_schema",
    "extract_items_from_html",
    "extract_structured_from_html",
    "make_item_extractor",
    "normalize_transform",
]

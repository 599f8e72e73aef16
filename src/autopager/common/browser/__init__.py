"""浏览器模块"""

from .engine import BrowserEngine
from .session import DocumentOptions, open_document, open_document_with_response

__all__ = [
    "BrowserEngine",
    "DocumentOptions",
    "open_document",
    "open_document_with_response",
]

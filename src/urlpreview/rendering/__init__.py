"""Document rewriting and viewer documents."""

from .documents import error_document, frame_document, placeholder_document
from .rewriter import inject_base, rewrite, wrap_document

__all__ = [
    "error_document",
    "frame_document",
    "inject_base",
    "placeholder_document",
    "rewrite",
    "wrap_document",
]

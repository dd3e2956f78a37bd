from .highlight import highlight_syntax
from .markdown import format_text
from .renderer import render
from .sanitize import sanitize_markup
from .segments import parse_segments

__all__ = [
    "format_text",
    "highlight_syntax",
    "parse_segments",
    "render",
    "sanitize_markup",
]

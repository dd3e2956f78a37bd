# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/codeflow

"""Markdown-style formatting of assistant prose.

The input is HTML-escaped before any substitution, so the only tags in the
output are the ones emitted here.
"""

import html
import re

BOLD = re.compile(r"\*\*(.*?)\*\*")
ITALIC = re.compile(r"\*(.*?)\*")
INLINE_CODE = re.compile(r"`([^`]+)`")

# Most specific first so "### x" is never read as "# ## x".
HEADINGS = (
    (re.compile(r"^### (.*)$", re.MULTILINE), r'<h3 class="text-lg font-semibold mt-4 mb-2">\1</h3>'),
    (re.compile(r"^## (.*)$", re.MULTILINE), r'<h2 class="text-xl font-semibold mt-6 mb-3">\1</h2>'),
    (re.compile(r"^# (.*)$", re.MULTILINE), r'<h1 class="text-2xl font-bold mt-6 mb-4">\1</h1>'),
)

BULLET_ITEM = '<li class="ml-4 list-disc list-inside mb-1">'
NUMBERED_ITEM = '<li class="ml-4 list-decimal list-inside mb-1">'

BULLET_LINE = re.compile(r"^[-*•] (.*)$", re.MULTILINE)
NUMBERED_LINE = re.compile(r"^\d+\. (.*)$", re.MULTILINE)


def _item_run(item_open: str) -> re.Pattern[str]:
    item = re.escape(item_open) + r"[^\n]*</li>"
    return re.compile(item + r"(?:[ \t]*\n" + item + r")*")


BULLET_RUN = _item_run(BULLET_ITEM)
NUMBERED_RUN = _item_run(NUMBERED_ITEM)

PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
BLOCK_ELEMENT = re.compile(r"<(?:h[1-3]|ul|ol)\b")


def format_text(text: str) -> str:
    """Convert markdown-style prose into markup.

    Substitutions run once, in a fixed order: bold, italic, inline code,
    headings, list items, list containers, paragraphs.

    Args:
        text: Prose taken from a text segment.

    Returns:
        str: Markup restricted to strong, em, code, h1-h3, ul, ol, li and p.
    """
    text = html.escape(text, quote=False)

    text = BOLD.sub(r"<strong>\1</strong>", text)
    text = ITALIC.sub(r"<em>\1</em>", text)
    text = INLINE_CODE.sub(r'<code class="inline-code">\1</code>', text)

    for pattern, replacement in HEADINGS:
        text = pattern.sub(replacement, text)

    text = BULLET_LINE.sub(BULLET_ITEM + r"\1</li>", text)
    text = NUMBERED_LINE.sub(NUMBERED_ITEM + r"\1</li>", text)

    text = NUMBERED_RUN.sub(lambda m: f'<ol class="mb-4">{m.group(0)}</ol>', text)
    text = BULLET_RUN.sub(lambda m: f'<ul class="mb-4">{m.group(0)}</ul>', text)

    chunks = PARAGRAPH_BREAK.split(text)
    return "\n".join(_wrap_paragraph(chunk) for chunk in chunks)


def _wrap_paragraph(chunk: str) -> str:
    if chunk.strip() and not BLOCK_ELEMENT.search(chunk):
        return f'<p class="mb-4">{chunk.strip()}</p>'
    return chunk

# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/codeflow

import re
from typing import Any

from loguru import logger

from codeflow.models.segments import CodeSegment, Segment, TextSegment

DEFAULT_LANGUAGE = "javascript"

# Opening fence with optional language tag, non-greedy body, closing fence.
FENCE_PATTERN = re.compile(r"```(\w+)?\n?([\s\S]*?)```")


def parse_segments(text: Any) -> list[Segment]:
    """Split assistant output into prose and fenced code segments.

    re.split with two capture groups yields [text, lang, body, text, ...],
    so every third item starts a new (text, fence) pair. An unterminated fence
    never matches and stays part of the surrounding text.

    Args:
        text: The raw assistant response. Non-string input is coerced with str().

    Returns:
        list[Segment]: Segments in source order with keys unique within the parse.
    """
    if text is None:
        return []
    if not isinstance(text, str):
        text = str(text)

    try:
        parts = FENCE_PATTERN.split(text)
        segments: list[Segment] = []

        for i in range(0, len(parts), 3):
            prose = parts[i]
            if prose and prose.strip():
                segments.append(TextSegment(content=prose.strip(), key=f"text-{i}"))

            if i + 2 < len(parts):
                language = parts[i + 1] or DEFAULT_LANGUAGE
                body = (parts[i + 2] or "").strip()
                if body:
                    segments.append(CodeSegment(language=language, content=body, key=f"code-{i}"))

        return segments
    except Exception as e:  # pragma: no cover
        logger.warning(f"Failed to parse segments, falling back to plain text: {e}")
        return [TextSegment(content=text, key="text-0")]

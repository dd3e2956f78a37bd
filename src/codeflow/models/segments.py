# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/codeflow

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class TextSegment(BaseModel):
    """Markdown-formatted prose between code fences."""

    type: Literal["text"] = "text"
    content: str
    key: str


class CodeSegment(BaseModel):
    """One fenced code block."""

    type: Literal["code"] = "code"
    language: str
    content: str
    key: str


Segment = Annotated[Union[TextSegment, CodeSegment], Field(discriminator="type")]


class RenderedSegment(BaseModel):
    """A segment together with the markup the client displays for it."""

    type: Literal["text", "code"]
    key: str
    content: str
    html: str
    language: str | None = None
    executable: bool = False

# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/codeflow

"""Request and response bodies of the HTTP handlers."""

from typing import Any

from pydantic import BaseModel

from codeflow.models.execution import CamelModel, ExecutionResult
from codeflow.models.segments import RenderedSegment


class User(BaseModel):
    """The authenticated caller, as returned by the identity provider."""

    id: str
    email: str | None = None
    role: str | None = None


class ChatRequest(CamelModel):
    message: str = ""
    conversation_id: str | None = None


class ChatResponse(CamelModel):
    response: str
    conversation_id: str


class CodeGenerationRequest(CamelModel):
    prompt: str = ""
    conversation_id: str | None = None
    project_id: str | None = None


class CodeGenerationResponse(CamelModel):
    response: str
    conversation_id: str
    project_id: str | None = None
    metadata: dict[str, Any]


class ExecutionResponse(BaseModel):
    result: ExecutionResult


class RenderRequest(BaseModel):
    content: str = ""


class RenderResponse(BaseModel):
    segments: list[RenderedSegment]

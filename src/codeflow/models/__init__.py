from .api import (
    ChatRequest,
    ChatResponse,
    CodeGenerationRequest,
    CodeGenerationResponse,
    ExecutionResponse,
    RenderRequest,
    RenderResponse,
    User,
)
from .execution import ExecOutput, ExecutionRequest, ExecutionResult, SandboxHandle
from .segments import CodeSegment, RenderedSegment, Segment, TextSegment

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "CodeGenerationRequest",
    "CodeGenerationResponse",
    "CodeSegment",
    "ExecOutput",
    "ExecutionRequest",
    "ExecutionResponse",
    "ExecutionResult",
    "RenderRequest",
    "RenderResponse",
    "RenderedSegment",
    "SandboxHandle",
    "Segment",
    "TextSegment",
    "User",
]

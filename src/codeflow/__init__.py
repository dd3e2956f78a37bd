# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/codeflow

"""
codeflow
"""

__version__ = "0.1.0"
__author__ = "Gowtham A Rao"
__email__ = "gowtham.rao@coreason.ai"

from .config import CodeflowConfig
from .exceptions import (
    AuthError,
    CodeflowError,
    ExecutionError,
    ProvisioningError,
    ValidationError,
)
from .languages import Language, normalize_language
from .models import CodeSegment, ExecutionRequest, ExecutionResult, TextSegment
from .orchestrator import ExecutionOrchestrator, SandboxLease
from .providers import DaytonaProvider, SandboxProvider
from .rendering import format_text, highlight_syntax, parse_segments, render

__all__ = [
    "AuthError",
    "CodeSegment",
    "CodeflowConfig",
    "CodeflowError",
    "DaytonaProvider",
    "ExecutionError",
    "ExecutionOrchestrator",
    "ExecutionRequest",
    "ExecutionResult",
    "Language",
    "ProvisioningError",
    "SandboxLease",
    "SandboxProvider",
    "TextSegment",
    "ValidationError",
    "format_text",
    "highlight_syntax",
    "normalize_language",
    "parse_segments",
    "render",
]

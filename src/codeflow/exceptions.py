# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/codeflow

"""Error taxonomy shared by the request handlers.

Persistence and cleanup problems are not exceptions: they are logged as
warnings and never reach the caller.
"""


class CodeflowError(Exception):
    """Base class for all errors surfaced to a caller."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CodeflowError, ValueError):
    """Missing or malformed input. Raised before any remote call."""

    status_code = 400


class AuthError(CodeflowError, PermissionError):
    """Missing or invalid bearer credential."""

    status_code = 401


class ConfigurationError(CodeflowError):
    """A required service credential is not configured."""


class ProvisioningError(CodeflowError, RuntimeError):
    """The sandbox could not be created. Nothing needs cleaning up."""


class ExecutionError(CodeflowError, RuntimeError):
    """The exec call failed after a sandbox was created."""


class StorageError(CodeflowError):
    """A database request was rejected or could not be sent."""


class LLMError(CodeflowError):
    """The language-model API returned an error."""

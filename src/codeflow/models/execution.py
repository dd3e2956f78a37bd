# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/codeflow

"""Data models for sandbox execution requests and results."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exchanged with the web client using camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExecutionRequest(CamelModel):
    """A request to run a snippet of code.

    Attributes:
        code: The source code to execute.
        language: Language tag as sent by the client, aliases allowed.
        conversation_id: Conversation the result message is appended to.
        project_id: Project recorded in the result metadata.
    """

    code: str = ""
    language: str = ""
    conversation_id: str | None = None
    project_id: str | None = None


class SandboxHandle(BaseModel):
    """A provisioned remote sandbox."""

    id: str
    name: str
    runtime: str


class ExecOutput(BaseModel):
    """Raw output of one command run inside a sandbox."""

    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0


class ExecutionResult(CamelModel):
    """Represents the result of a code execution in a sandbox.

    Attributes:
        success: Always True; failures are raised, never returned.
        output: Captured stdout, or "No output" when empty.
        error: Captured stderr, None when empty.
        exit_code: The exit code of the process.
        backend: Label of the sandbox provider.
        language: Canonical language the code ran as.
        sandbox_id: Identifier of the (now deleted) sandbox.
    """

    success: bool = True
    output: str
    error: str | None = None
    exit_code: int = 0
    backend: str
    language: str
    sandbox_id: str
    executed_at: str | None = Field(default=None)

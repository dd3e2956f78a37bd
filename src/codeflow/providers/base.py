# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/codeflow

from abc import ABC, abstractmethod

from codeflow.models.execution import ExecOutput, SandboxHandle


class SandboxProvider(ABC):
    """
    Abstract base class for remote sandbox providers (e.g., Daytona).
    Follows the Strategy Pattern.
    """

    #: Human readable backend label used in results and persisted messages.
    label: str = "Sandbox"

    @property
    def backend(self) -> str:
        return self.label.lower()

    @abstractmethod
    async def create_sandbox(self, name: str, runtime: str) -> SandboxHandle:
        """Provision a new sandbox.

        Args:
            name: A name unique to this request.
            runtime: The runtime image, e.g. 'python:3.11'.

        Returns:
            SandboxHandle: The created sandbox.

        Raises:
            ProvisioningError: If the sandbox could not be created.
        """
        pass  # pragma: no cover

    @abstractmethod
    async def exec(self, sandbox_id: str, command: str, stdin: str, timeout_ms: int) -> ExecOutput:
        """Run a command in the sandbox, feeding the code on standard input.

        Args:
            sandbox_id: The sandbox to run in.
            command: The interpreter or shell to start.
            stdin: The code passed to the command.
            timeout_ms: Upper bound enforced by the provider.

        Returns:
            ExecOutput: Captured stdout, stderr and exit code.

        Raises:
            ExecutionError: If the provider rejects or fails the call.
        """
        pass  # pragma: no cover

    @abstractmethod
    async def delete_sandbox(self, sandbox_id: str) -> None:
        """Delete the sandbox and release its resources."""
        pass  # pragma: no cover

    async def aclose(self) -> None:
        """Release client resources held by the provider."""
        return None

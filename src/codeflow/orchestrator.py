# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/codeflow

import time
from datetime import datetime, timezone
from uuid import uuid4

import anyio
from loguru import logger

from codeflow.config import CodeflowConfig
from codeflow.exceptions import CodeflowError, ExecutionError, ValidationError
from codeflow.integrations.supabase import SupabaseAuth, SupabaseStore
from codeflow.languages import Language, normalize_language
from codeflow.models.execution import ExecOutput, ExecutionRequest, ExecutionResult, SandboxHandle
from codeflow.providers.base import SandboxProvider
from codeflow.utils.audit import AuditLogger

NO_OUTPUT = "No output"


def format_execution_message(
    backend: str, language: Language, code: str, output: ExecOutput
) -> str:
    """Render the assistant message stored for an execution result."""
    errors = f"**Errors:**\n```\n{output.stderr}\n```\n\n" if output.stderr else ""
    return (
        f"**Code Execution Result ({backend} - {language.value.upper()})**\n\n"
        f"**Input:**\n```{language.value}\n{code}\n```\n\n"
        f"**Output:**\n```\n{output.stdout or NO_OUTPUT}\n```\n\n"
        f"{errors}"
        f"**Exit Code:** {output.exit_code}\n"
        f"**Backend:** {backend}"
    )


def sandbox_name() -> str:
    """A sandbox name unique per request."""
    return f"ai-execution-{int(time.time() * 1000)}-{uuid4().hex[:8]}"


class SandboxLease:
    """Scoped ownership of one sandbox.

    The sandbox is created on entry and deleted on every exit path once it
    exists. Delete failures are logged and never raised, so the caller keeps
    either its result or the original error.
    """

    def __init__(self, provider: SandboxProvider, name: str, runtime: str):
        self.provider = provider
        self.name = name
        self.runtime = runtime
        self.handle: SandboxHandle | None = None

    async def __aenter__(self) -> SandboxHandle:
        self.handle = await self.provider.create_sandbox(self.name, self.runtime)
        return self.handle

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        if self.handle is None:
            return
        sandbox_id = self.handle.id
        logger.info("Cleaning up sandbox", sandbox_id=sandbox_id)
        # Shielded so a cancelled request still releases its sandbox.
        with anyio.CancelScope(shield=True):
            try:
                await self.provider.delete_sandbox(sandbox_id)
                logger.info("Sandbox cleaned up successfully", sandbox_id=sandbox_id)
            except Exception as e:
                logger.warning(f"Failed to cleanup sandbox {sandbox_id}: {e}")
        self.handle = None


class ExecutionOrchestrator:
    """Runs untrusted code in an ephemeral sandbox.

    validate -> authorize -> provision -> execute -> persist -> clean up.
    One request owns exactly one sandbox; nothing is pooled or reused.
    """

    def __init__(
        self,
        provider: SandboxProvider,
        auth: SupabaseAuth,
        store: SupabaseStore | None = None,
        config: CodeflowConfig | None = None,
        audit: AuditLogger | None = None,
    ):
        """Initializes the ExecutionOrchestrator.

        Args:
            provider: The sandbox provider.
            auth: Resolves bearer tokens to users.
            store: Where result messages are written. None disables persistence.
            config: Configuration; defaults are loaded from the environment.
            audit: Audit logger; built from config when omitted.
        """
        self.config = config or CodeflowConfig()
        self.provider = provider
        self.auth = auth
        self.store = store
        self.audit = audit or AuditLogger(enabled=self.config.enable_audit_logging)

    @staticmethod
    def validate(request: ExecutionRequest) -> Language:
        """Reject empty code and unsupported languages before any remote call.

        Raises:
            ValidationError: If the request cannot be executed.
        """
        if not request.code or not request.code.strip():
            raise ValidationError("Code is required")
        return normalize_language(request.language)

    async def execute(self, request: ExecutionRequest, token: str | None) -> ExecutionResult:
        """Execute the request's code in a fresh sandbox.

        Args:
            request: Code, language and optional conversation context.
            token: The caller's bearer token.

        Returns:
            ExecutionResult: The captured output.

        Raises:
            ValidationError: Empty code or unsupported language.
            AuthError: Missing or invalid token.
            ProvisioningError: The sandbox could not be created.
            ExecutionError: The exec call failed; the sandbox was still deleted.
        """
        language = self.validate(request)
        user = await self.auth.get_user(token)

        backend = self.provider.label
        logger.info(f"Executing {language.value} code via {backend} for user: {user.id}")
        self.audit.log_pre_execution(request.code, language.value, user_id=user.id)

        async with SandboxLease(self.provider, sandbox_name(), language.runtime_image) as sandbox:
            try:
                output = await self.provider.exec(
                    sandbox.id,
                    language.interpreter,
                    request.code,
                    self.config.execution_timeout_ms,
                )
            except CodeflowError:
                raise
            except Exception as e:
                raise ExecutionError(f"Code execution failed: {e}") from e

            executed_at = datetime.now(timezone.utc).isoformat()
            result = ExecutionResult(
                success=True,
                output=output.stdout or NO_OUTPUT,
                error=output.stderr or None,
                exit_code=output.exit_code,
                backend=self.provider.backend,
                language=language.value,
                sandbox_id=sandbox.id,
                executed_at=executed_at,
            )

            if request.conversation_id and self.store is not None:
                await self._persist(request, language, output, result, token)

        return result

    async def _persist(
        self,
        request: ExecutionRequest,
        language: Language,
        output: ExecOutput,
        result: ExecutionResult,
        token: str | None,
    ) -> None:
        """Append the result to the conversation. Failures are logged only."""
        assert self.store is not None
        logger.info("Storing execution result", conversation_id=request.conversation_id)
        store = self.store.for_user(token, self.config.supabase_anon_key) if token else self.store
        try:
            await store.insert(
                "messages",
                {
                    "conversation_id": request.conversation_id,
                    "role": "assistant",
                    "content": format_execution_message(self.provider.label, language, request.code, output),
                    "message_type": "execution_result",
                    "metadata": {
                        "backend": result.backend,
                        "language": result.language,
                        "sandboxId": result.sandbox_id,
                        "exitCode": result.exit_code,
                        "executedAt": result.executed_at,
                        "projectId": request.project_id,
                    },
                },
            )
        except Exception as e:
            logger.error(
                f"Failed to store execution result: {e}",
                conversation_id=request.conversation_id,
                sandbox_id=result.sandbox_id,
            )

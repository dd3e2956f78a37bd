# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/codeflow

from datetime import datetime, timezone

from loguru import logger

from codeflow.config import CodeflowConfig
from codeflow.exceptions import StorageError, ValidationError
from codeflow.integrations.llm import ChatCompletionClient
from codeflow.integrations.supabase import SupabaseAuth, SupabaseStore
from codeflow.models.api import CodeGenerationResponse
from codeflow.services.conversations import ensure_conversation
from codeflow.services.prompts import CODE_GENERATION_SYSTEM_PROMPT, EXECUTION_FOOTER, SANDBOX_CONTEXT


class CodeGenerationService:
    """Generates code with the sandbox-aware assistant prompt.

    Only conversation creation is fatal; message and code-session writes are
    best effort and logged on failure.
    """

    def __init__(
        self,
        auth: SupabaseAuth,
        store: SupabaseStore,
        llm: ChatCompletionClient,
        config: CodeflowConfig | None = None,
    ):
        self.config = config or CodeflowConfig()
        self.auth = auth
        self.store = store
        self.llm = llm

    async def generate(
        self,
        prompt: str,
        conversation_id: str | None,
        project_id: str | None,
        token: str | None,
    ) -> CodeGenerationResponse:
        """Generate a code-focused answer for the prompt.

        Raises:
            ValidationError: If the prompt is empty.
            AuthError: If the token is missing or invalid.
            StorageError: If a new conversation could not be created.
            LLMError: If the model call failed.
        """
        if not prompt or not prompt.strip():
            raise ValidationError("Prompt is required")

        user = await self.auth.get_user(token)
        logger.info("Code generation request", user_id=user.id, conversation_id=conversation_id, project_id=project_id)

        try:
            conversation_id = await ensure_conversation(self.store, user, conversation_id, prompt)
        except StorageError as e:
            logger.error(f"Error creating conversation: {e}")
            raise StorageError("Failed to create conversation") from e

        try:
            await self.store.insert(
                "messages",
                {
                    "conversation_id": conversation_id,
                    "role": "user",
                    "content": prompt,
                    "message_type": "code_generation",
                    "metadata": {"projectId": project_id},
                },
            )
        except StorageError as e:
            logger.error(f"Error storing message: {e}")

        model = self.config.code_generation_model
        reply = await self.llm.complete(
            [
                {"role": "system", "content": CODE_GENERATION_SYSTEM_PROMPT},
                {"role": "user", "content": f"{prompt}\n\n{SANDBOX_CONTEXT}"},
            ],
            model=model,
            max_completion_tokens=self.config.code_generation_max_tokens,
        )
        reply += EXECUTION_FOOTER
        logger.info(f"Generated code response length: {len(reply)}")

        generated_at = datetime.now(timezone.utc).isoformat()
        try:
            await self.store.insert(
                "messages",
                {
                    "conversation_id": conversation_id,
                    "role": "assistant",
                    "content": reply,
                    "message_type": "code_generation",
                    "metadata": {
                        "model": model,
                        "projectId": project_id,
                        "daytona_available": True,
                        "generated_at": generated_at,
                    },
                },
            )
        except StorageError as e:
            logger.error(f"Error storing AI message: {e}")

        if project_id:
            await self._record_session(project_id, conversation_id, prompt, len(reply), generated_at)

        return CodeGenerationResponse(
            response=reply,
            conversation_id=conversation_id,
            project_id=project_id,
            metadata={
                "model": model,
                "daytona_available": True,
                "response_length": len(reply),
            },
        )

    async def _record_session(
        self, project_id: str, conversation_id: str, prompt: str, response_length: int, timestamp: str
    ) -> None:
        try:
            await self.store.upsert(
                "code_sessions",
                {
                    "project_id": project_id,
                    "conversation_id": conversation_id,
                    "session_data": {
                        "last_prompt": prompt,
                        "response_length": response_length,
                        "timestamp": timestamp,
                    },
                },
            )
        except StorageError as e:
            logger.error(f"Error creating code session: {e}")

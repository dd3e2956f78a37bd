# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/codeflow

from loguru import logger

from codeflow.config import CodeflowConfig
from codeflow.exceptions import StorageError, ValidationError
from codeflow.integrations.llm import ChatCompletionClient
from codeflow.integrations.supabase import SupabaseAuth, SupabaseStore
from codeflow.models.api import ChatResponse
from codeflow.services.conversations import ensure_conversation
from codeflow.services.prompts import CHAT_SYSTEM_PROMPT


class ChatService:
    """Conversational assistant backed by the stored message history.

    Every storage step is fatal here: a reply is only returned once both
    sides of the exchange are persisted.
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

    async def chat(self, message: str, conversation_id: str | None, token: str | None) -> ChatResponse:
        """Answer one user message within a conversation.

        Args:
            message: The user's message.
            conversation_id: Existing conversation, or None to start one.
            token: The caller's bearer token.

        Returns:
            ChatResponse: The assistant reply and the conversation it belongs to.

        Raises:
            ValidationError: If the message is empty.
            AuthError: If the token is missing or invalid.
            StorageError: If a conversation or message could not be stored or read.
            LLMError: If the model call failed.
        """
        if not message or not message.strip():
            raise ValidationError("Message is required")

        user = await self.auth.get_user(token)
        logger.info("Processing request for user", user_id=user.id)

        try:
            conversation_id = await ensure_conversation(self.store, user, conversation_id, message)
        except StorageError as e:
            logger.error(f"Error creating conversation: {e}")
            raise StorageError("Failed to create conversation") from e

        try:
            await self.store.insert(
                "messages",
                {"conversation_id": conversation_id, "role": "user", "content": message},
            )
        except StorageError as e:
            logger.error(f"Error storing user message: {e}")
            raise StorageError("Failed to store message") from e

        try:
            history = await self.store.select(
                "messages",
                filters={"conversation_id": conversation_id},
                order="created_at",
                ascending=False,
                limit=self.config.chat_history_limit,
            )
        except StorageError as e:
            logger.error(f"Error fetching messages: {e}")
            raise StorageError("Failed to fetch conversation history") from e

        # Newest first from the store; the model expects chronological order.
        messages = [{"role": "system", "content": CHAT_SYSTEM_PROMPT}]
        messages.extend({"role": row["role"], "content": row["content"]} for row in reversed(history))

        logger.info(f"Calling OpenAI with message count: {len(messages)}")
        reply = await self.llm.complete(
            messages,
            model=self.config.chat_model,
            max_tokens=self.config.chat_max_tokens,
            temperature=self.config.chat_temperature,
            stream=False,
        )
        logger.info(f"AI response generated, length: {len(reply)}")

        try:
            await self.store.insert(
                "messages",
                {"conversation_id": conversation_id, "role": "assistant", "content": reply},
            )
        except StorageError as e:
            logger.error(f"Error storing AI message: {e}")
            raise StorageError("Failed to store AI response") from e

        return ChatResponse(response=reply, conversation_id=conversation_id)

from typing import Any

import pytest

from codeflow.config import CodeflowConfig
from codeflow.exceptions import AuthError, StorageError, ValidationError
from codeflow.services.chat import ChatService
from codeflow.services.conversations import conversation_title
from codeflow.services.prompts import CHAT_SYSTEM_PROMPT


@pytest.fixture
def service(mock_auth: Any, mock_store: Any, mock_llm: Any, config: CodeflowConfig) -> ChatService:
    return ChatService(auth=mock_auth, store=mock_store, llm=mock_llm, config=config)


def test_conversation_title() -> None:
    assert conversation_title("short") == "short"
    assert conversation_title("x" * 50) == "x" * 50
    assert conversation_title("y" * 51) == "y" * 50 + "..."


@pytest.mark.asyncio
async def test_chat_creates_conversation(service: ChatService, mock_store: Any, mock_llm: Any) -> None:
    mock_store.select.return_value = [{"role": "user", "content": "hello"}]

    response = await service.chat("hello", None, "token")

    assert response.conversation_id == "conversations-1"
    assert response.response == mock_llm.complete.return_value

    tables = [call.args[0] for call in mock_store.insert.await_args_list]
    assert tables == ["conversations", "messages", "messages"]
    assert mock_store.insert.await_args_list[0].args[1] == {"user_id": "user-1", "title": "hello"}
    assert mock_store.insert.await_args_list[2].args[1]["role"] == "assistant"

    mock_store.select.assert_awaited_once_with(
        "messages", filters={"conversation_id": "conversations-1"}, order="created_at", ascending=False, limit=10
    )

    messages = mock_llm.complete.await_args.args[0]
    assert messages[0] == {"role": "system", "content": CHAT_SYSTEM_PROMPT}
    assert messages[1] == {"role": "user", "content": "hello"}
    kwargs = mock_llm.complete.await_args.kwargs
    assert kwargs["model"] == "gpt-4o-mini"
    assert kwargs["max_tokens"] == 1500
    assert kwargs["temperature"] == 0.7


@pytest.mark.asyncio
async def test_chat_reuses_conversation(service: ChatService, mock_store: Any) -> None:
    response = await service.chat("hi again", "conv-9", "token")

    assert response.conversation_id == "conv-9"
    tables = [call.args[0] for call in mock_store.insert.await_args_list]
    assert "conversations" not in tables


@pytest.mark.asyncio
async def test_chat_requires_message(service: ChatService, mock_auth: Any) -> None:
    with pytest.raises(ValidationError, match="Message is required"):
        await service.chat("  ", None, "token")
    mock_auth.get_user.assert_not_awaited()


@pytest.mark.asyncio
async def test_chat_requires_auth(service: ChatService, mock_auth: Any, mock_llm: Any) -> None:
    mock_auth.get_user.side_effect = AuthError("Authentication failed")

    with pytest.raises(AuthError):
        await service.chat("hello", None, "bad")
    mock_llm.complete.assert_not_awaited()


@pytest.mark.asyncio
async def test_chat_user_message_failure_is_fatal(service: ChatService, mock_store: Any, mock_llm: Any) -> None:
    mock_store.insert.side_effect = StorageError("insert failed")

    with pytest.raises(StorageError, match="Failed to store message"):
        await service.chat("hello", "conv-1", "token")
    mock_llm.complete.assert_not_awaited()


@pytest.mark.asyncio
async def test_chat_history_failure_is_fatal(service: ChatService, mock_store: Any) -> None:
    mock_store.select.side_effect = StorageError("select failed")

    with pytest.raises(StorageError, match="Failed to fetch conversation history"):
        await service.chat("hello", "conv-1", "token")


@pytest.mark.asyncio
async def test_chat_reply_storage_failure_is_fatal(service: ChatService, mock_store: Any) -> None:
    calls = {"n": 0}

    async def fail_second(table: str, row: dict[str, Any]) -> dict[str, Any]:
        calls["n"] += 1
        if calls["n"] == 2:
            raise StorageError("insert failed")
        return row

    mock_store.insert.side_effect = fail_second

    with pytest.raises(StorageError, match="Failed to store AI response"):
        await service.chat("hello", "conv-1", "token")


@pytest.mark.asyncio
async def test_chat_conversation_creation_failure(service: ChatService, mock_store: Any) -> None:
    mock_store.insert.side_effect = lambda table, row: {}

    with pytest.raises(StorageError, match="Failed to create conversation"):
        await service.chat("hello", None, "token")


@pytest.mark.asyncio
async def test_chat_sends_latest_history_in_order(service: ChatService, mock_store: Any, mock_llm: Any) -> None:
    # The store returns newest first.
    mock_store.select.return_value = [
        {"role": "user", "content": "third"},
        {"role": "assistant", "content": "second"},
        {"role": "user", "content": "first"},
    ]

    await service.chat("third", "conv-9", "token")

    messages = mock_llm.complete.await_args.args[0]
    assert [m["content"] for m in messages[1:]] == ["first", "second", "third"]
    assert messages[-1] == {"role": "user", "content": "third"}

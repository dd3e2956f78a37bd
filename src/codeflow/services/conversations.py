from codeflow.exceptions import StorageError
from codeflow.integrations.supabase import SupabaseStore
from codeflow.models.api import User

TITLE_LENGTH = 50


def conversation_title(text: str) -> str:
    """First 50 characters of the opening message, with an ellipsis if cut."""
    return text[:TITLE_LENGTH] + ("..." if len(text) > TITLE_LENGTH else "")


async def ensure_conversation(store: SupabaseStore, user: User, conversation_id: str | None, text: str) -> str:
    """Return conversation_id, creating a conversation titled from text when missing.

    Raises:
        StorageError: If the conversation could not be created.
    """
    if conversation_id:
        return conversation_id

    row = await store.insert("conversations", {"user_id": user.id, "title": conversation_title(text)})
    new_id = row.get("id")
    if not new_id:
        raise StorageError("Failed to create conversation")
    return str(new_id)

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from codeflow.config import CodeflowConfig
from codeflow.models.api import User
from codeflow.models.execution import ExecOutput, SandboxHandle


@pytest.fixture
def config() -> CodeflowConfig:
    return CodeflowConfig(
        daytona_api_key="daytona-key",
        daytona_base_url="https://daytona.test/v1",
        supabase_url="https://supabase.test",
        supabase_anon_key="anon-key",
        supabase_service_role_key="service-key",
        openai_api_key="openai-key",
        openai_base_url="https://openai.test/v1",
        enable_audit_logging=True,
    )


@pytest.fixture
def mock_user() -> User:
    return User(id="user-1", email="test@example.com", role="authenticated")


@pytest.fixture
def mock_auth(mock_user: User) -> Any:
    auth = MagicMock()
    auth.get_user = AsyncMock(return_value=mock_user)
    return auth


@pytest.fixture
def mock_store() -> Any:
    store = MagicMock()
    store.insert = AsyncMock(side_effect=lambda table, row: {"id": f"{table}-1", **row})
    store.select = AsyncMock(return_value=[])
    store.upsert = AsyncMock(side_effect=lambda table, row, on_conflict=None: row)
    store.delete = AsyncMock()
    store.for_user = MagicMock(return_value=store)
    return store


@pytest.fixture
def mock_provider() -> Any:
    provider = MagicMock()
    provider.label = "Daytona"
    provider.backend = "daytona"
    provider.create_sandbox = AsyncMock(
        side_effect=lambda name, runtime: SandboxHandle(id="sbx-1", name=name, runtime=runtime)
    )
    provider.exec = AsyncMock(return_value=ExecOutput(stdout="1\n", stderr="", exit_code=0))
    provider.delete_sandbox = AsyncMock()
    return provider


@pytest.fixture
def mock_llm() -> Any:
    llm = MagicMock()
    llm.complete = AsyncMock(return_value="Here you go:\n```python\nprint(1)\n```")
    return llm

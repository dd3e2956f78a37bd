import httpx

from codeflow.config import CodeflowConfig
from codeflow.integrations.llm import ChatCompletionClient
from codeflow.integrations.supabase import SupabaseAuth, SupabaseStore
from codeflow.orchestrator import ExecutionOrchestrator
from codeflow.providers.base import SandboxProvider
from codeflow.providers.daytona import DaytonaProvider
from codeflow.services.chat import ChatService
from codeflow.services.codegen import CodeGenerationService


class ServiceFactory:
    """
    Builds the request handlers' collaborators from configuration,
    sharing one HTTP client.
    """

    def __init__(self, config: CodeflowConfig, client: httpx.AsyncClient):
        self.config = config
        self.client = client

    def get_provider(self) -> SandboxProvider:
        return DaytonaProvider(
            api_key=self.config.daytona_api_key,
            base_url=self.config.daytona_base_url,
            client=self.client,
            request_timeout=self.config.http_timeout,
        )

    def get_auth(self) -> SupabaseAuth:
        # Token lookups work with either key; the anon key is preferred.
        key = self.config.supabase_anon_key or self.config.supabase_service_role_key
        return SupabaseAuth(self.config.supabase_url, key, client=self.client)

    def get_store(self) -> SupabaseStore:
        key = self.config.supabase_service_role_key or self.config.supabase_anon_key
        return SupabaseStore(self.config.supabase_url, key, client=self.client)

    def get_llm(self) -> ChatCompletionClient:
        return ChatCompletionClient(
            api_key=self.config.openai_api_key,
            base_url=self.config.openai_base_url,
            client=self.client,
        )

    def get_orchestrator(self) -> ExecutionOrchestrator:
        return ExecutionOrchestrator(
            provider=self.get_provider(),
            auth=self.get_auth(),
            store=self.get_store(),
            config=self.config,
        )

    def get_chat_service(self) -> ChatService:
        return ChatService(auth=self.get_auth(), store=self.get_store(), llm=self.get_llm(), config=self.config)

    def get_code_generation_service(self) -> CodeGenerationService:
        return CodeGenerationService(
            auth=self.get_auth(), store=self.get_store(), llm=self.get_llm(), config=self.config
        )

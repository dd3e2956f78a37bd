from typing import Any

from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from codeflow.integrations.secrets import SecretsIntegrator


class SecretsSettingsSource(PydanticBaseSettingsSource):
    """
    Custom Pydantic Settings Source for the platform-provided secrets.
    """

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        # Unused because __call__ returns the full dict; required by the ABC.
        return None, field_name, False  # pragma: no cover

    def __call__(self) -> dict[str, Any]:
        secrets_integrator = SecretsIntegrator()
        secrets: dict[str, Any] = {}

        # Config Field -> environment key
        mapping = {
            "daytona_api_key": "DAYTONA_API_KEY",
            "openai_api_key": "OPENAI_API_KEY",
            "supabase_url": "SUPABASE_URL",
            "supabase_anon_key": "SUPABASE_ANON_KEY",
            "supabase_service_role_key": "SUPABASE_SERVICE_ROLE_KEY",
        }

        for field, key in mapping.items():
            val = secrets_integrator.get_secret(key)
            if val:
                secrets[field] = val

        return secrets


class CodeflowConfig(BaseSettings):
    """
    Configuration for the Codeflow back end.
    """

    # Daytona sandbox provider
    daytona_api_key: str | None = None
    daytona_base_url: str = "https://api.daytona.io/v1"
    execution_timeout_ms: int = 30000

    # Supabase (auth + PostgREST)
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    supabase_service_role_key: str | None = None

    # Language model
    openai_api_key: str | None = None
    openai_base_url: str = "https://api.openai.com/v1"
    chat_model: str = "gpt-4o-mini"
    chat_max_tokens: int = 1500
    chat_temperature: float = 0.7
    chat_history_limit: int = 10
    code_generation_model: str = "gpt-5-2025-08-07"
    code_generation_max_tokens: int = 4000

    http_timeout: float = 60.0
    enable_audit_logging: bool = True

    host: str = "0.0.0.0"
    port: int = 8000

    model_config = SettingsConfigDict(
        env_prefix="CODEFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            SecretsSettingsSource(settings_cls),
            file_secret_settings,
        )

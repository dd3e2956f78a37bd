import httpx
from loguru import logger

from codeflow.exceptions import ConfigurationError, ExecutionError, ProvisioningError
from codeflow.models.execution import ExecOutput, SandboxHandle
from codeflow.providers.base import SandboxProvider


class DaytonaProvider(SandboxProvider):
    """Daytona implementation of the SandboxProvider.

    Talks to the Daytona REST API: one sandbox per execution, code sent as
    standard input to the interpreter.
    """

    label = "Daytona"

    def __init__(
        self,
        api_key: str | None,
        base_url: str = "https://api.daytona.io/v1",
        client: httpx.AsyncClient | None = None,
        request_timeout: float = 60.0,
    ):
        """Initializes the DaytonaProvider.

        Args:
            api_key: Daytona service credential.
            base_url: Base URL of the Daytona API.
            client: Optional httpx.AsyncClient for connection pooling.
            request_timeout: Client-side timeout for each HTTP call in seconds.
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.request_timeout = request_timeout
        self._internal_client = client is None
        self._client = client or httpx.AsyncClient(timeout=request_timeout)

    def _headers(self) -> dict[str, str]:
        if not self.api_key:
            raise ConfigurationError("Daytona API key not configured")
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def create_sandbox(self, name: str, runtime: str) -> SandboxHandle:
        headers = self._headers()
        logger.info(f"Creating Daytona sandbox {name} ({runtime})")
        try:
            response = await self._client.post(
                f"{self.base_url}/sandboxes",
                headers=headers,
                json={"name": name, "runtime": runtime},
            )
        except httpx.HTTPError as e:
            logger.error(f"Failed to create Daytona sandbox: {e}")
            raise ProvisioningError("Failed to create execution environment") from e

        if response.is_error:
            logger.error(f"Failed to create Daytona sandbox: {response.text}")
            raise ProvisioningError("Failed to create execution environment")

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Daytona returned an unreadable sandbox: {response.text}")
            raise ProvisioningError("Failed to create execution environment") from e

        sandbox_id = data.get("id") if isinstance(data, dict) else None
        if not sandbox_id:
            logger.error(f"Daytona returned no sandbox id: {data}")
            raise ProvisioningError("Failed to create execution environment")

        logger.info(f"Created sandbox: {sandbox_id}")
        return SandboxHandle(id=str(sandbox_id), name=name, runtime=runtime)

    async def exec(self, sandbox_id: str, command: str, stdin: str, timeout_ms: int) -> ExecOutput:
        headers = self._headers()
        # The remote side enforces timeout_ms; the client allows a little slack on top.
        timeout = max(self.request_timeout, timeout_ms / 1000 + 5)
        try:
            response = await self._client.post(
                f"{self.base_url}/sandboxes/{sandbox_id}/exec",
                headers=headers,
                json={"command": command, "stdin": stdin, "timeout": timeout_ms},
                timeout=timeout,
            )
        except httpx.HTTPError as e:
            logger.error(f"Failed to execute code in Daytona: {e}")
            raise ExecutionError("Code execution failed") from e

        if response.is_error:
            logger.error(f"Failed to execute code in Daytona: {response.text}")
            raise ExecutionError("Code execution failed")

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Daytona returned an unreadable exec result: {response.text}")
            raise ExecutionError("Code execution failed") from e
        if not isinstance(data, dict):
            logger.error(f"Daytona returned an unexpected exec result: {data}")
            raise ExecutionError("Code execution failed")

        logger.info("Code execution completed", sandbox_id=sandbox_id)
        return ExecOutput(
            stdout=data.get("stdout") or data.get("output") or "",
            stderr=data.get("stderr") or "",
            exit_code=data.get("exit_code") or 0,
        )

    async def delete_sandbox(self, sandbox_id: str) -> None:
        response = await self._client.delete(
            f"{self.base_url}/sandboxes/{sandbox_id}",
            headers={"Authorization": f"Bearer {self.api_key}"},
        )
        response.raise_for_status()

    async def aclose(self) -> None:
        if self._internal_client:
            await self._client.aclose()

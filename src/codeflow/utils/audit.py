import hashlib

from loguru import logger


class AuditLogger:
    """
    Emits audit events for code submitted to a sandbox.
    """

    def __init__(self, service_name: str = "codeflow", enabled: bool = True):
        self.enabled = enabled
        self._logger = logger.bind(audit=True, service=service_name)

    def log_pre_execution(self, code: str, language: str, user_id: str | None = None) -> str:
        """
        Log the code execution attempt. Returns a hash of the code.
        """
        code_hash = hashlib.sha256(code.encode("utf-8")).hexdigest()

        if self.enabled:
            self._logger.info(
                "SANDBOX_EXECUTION_START",
                language=language,
                code_hash=code_hash,
                code_length=len(code),
                user_id=user_id,
            )

        return code_hash

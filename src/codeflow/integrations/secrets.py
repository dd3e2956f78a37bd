import os

from loguru import logger


class SecretsIntegrator:
    """
    Reads service credentials from the environment.
    Accepts both the conventional unprefixed names (as set by the hosting
    platform) and the CODEFLOW_ prefixed variant.
    """

    def get_secret(self, key: str) -> str | None:
        """
        Fetch secret from Environment Variables.
        """
        val = os.getenv(key)
        if not val:
            val = os.getenv(f"CODEFLOW_{key}")

        if not val:
            logger.debug(f"Secret {key} not found in environment.")

        return val

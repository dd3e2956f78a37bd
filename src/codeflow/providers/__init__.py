from .base import SandboxProvider
from .daytona import DaytonaProvider

__all__ = ["DaytonaProvider", "SandboxProvider"]

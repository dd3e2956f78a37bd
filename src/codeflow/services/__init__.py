from .chat import ChatService
from .codegen import CodeGenerationService

__all__ = ["ChatService", "CodeGenerationService"]

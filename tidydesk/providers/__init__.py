"""Language model providers."""

from .ollama_provider import OllamaProvider

__all__ = ["OllamaProvider"]

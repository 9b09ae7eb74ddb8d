"""Ollama LLM provider."""

import logging
from typing import Any, Dict, List, Optional

import ollama

from ..settings import settings

logger = logging.getLogger(__name__)


class OllamaProvider:
    """Ollama LLM provider for local inference."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize Ollama provider.

        Args:
            base_url: Ollama server URL (defaults to settings)
            model: Model name (defaults to settings)
            timeout: Request timeout in seconds (defaults to settings)
        """
        self.base_url = base_url or settings.ollama.base_url
        self.model = model or settings.ollama.model
        self.timeout = timeout or settings.ollama.timeout

        self.client = ollama.Client(host=self.base_url, timeout=self.timeout)

        logger.info(f"Initialized Ollama provider: {self.model} at {self.base_url}")

    def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None,
        json_mode: bool = False,
    ) -> str:
        """
        Generate a response using Ollama.

        Args:
            prompt: User prompt
            system_prompt: System prompt (optional)
            temperature: Sampling temperature (model default if None)
            json_mode: Ask the model to answer with a JSON document

        Returns:
            Generated response text
        """
        messages = []

        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})

        messages.append({"role": "user", "content": prompt})

        return self.chat(messages, temperature=temperature, json_mode=json_mode)

    def chat(
        self,
        messages: List[Dict[str, str]],
        temperature: Optional[float] = None,
        json_mode: bool = False,
    ) -> str:
        """
        Chat with Ollama using message history.

        Args:
            messages: List of message dicts with 'role' and 'content'
            temperature: Sampling temperature (model default if None)
            json_mode: Ask the model to answer with a JSON document

        Returns:
            Generated response text
        """
        kwargs: Dict[str, Any] = {}
        if temperature is not None:
            kwargs["options"] = {"temperature": temperature}
        if json_mode:
            kwargs["format"] = "json"

        try:
            response = self.client.chat(
                model=self.model,
                messages=messages,
                **kwargs,
            )
            return response["message"]["content"]

        except Exception as e:
            logger.error(f"Error in Ollama chat: {e}")
            raise

    def is_available(self) -> bool:
        """Check whether the Ollama server answers."""
        try:
            self.client.list()
            return True
        except Exception as e:
            logger.warning(f"Ollama not reachable at {self.base_url}: {e}")
            return False

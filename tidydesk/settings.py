"""Settings configuration for TidyDesk."""

import os
from dataclasses import dataclass


def _int_from_env(name: str, default: str) -> int:
    value = os.getenv(name, default)
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got: {value}")


def _bool_from_env(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class OllamaSettings:
    """Ollama LLM configuration settings."""
    base_url: str = "http://localhost:11434"
    model: str = "llama3.1"
    timeout: float = 60.0
    max_retries: int = 2
    enabled: bool = True
    
    @classmethod
    def from_env(cls) -> "OllamaSettings":
        """Load Ollama settings from environment variables."""
        timeout_str = os.getenv("OLLAMA_TIMEOUT", "60")
        try:
            timeout = float(timeout_str)
        except ValueError:
            raise ValueError(f"OLLAMA_TIMEOUT must be a number, got: {timeout_str}")
        return cls(
            base_url=os.getenv("OLLAMA_BASE_URL", "http://localhost:11434"),
            model=os.getenv("OLLAMA_MODEL", "llama3.1"),
            timeout=timeout,
            max_retries=_int_from_env("OLLAMA_MAX_RETRIES", "2"),
            enabled=_bool_from_env("TIDYDESK_AI_ENABLED", "true"),
        )


@dataclass
class OrganizerSettings:
    """Classification and directory scan settings."""
    largest_files_limit: int = 10
    no_extension_key: str = "no-extension"
    preview_max_bytes: int = 100_000
    show_hidden: bool = False
    
    @classmethod
    def from_env(cls) -> "OrganizerSettings":
        """Load organizer settings from environment variables."""
        return cls(
            largest_files_limit=_int_from_env("LARGEST_FILES_LIMIT", "10"),
            preview_max_bytes=_int_from_env("PREVIEW_MAX_BYTES", "100000"),
            show_hidden=_bool_from_env("SHOW_HIDDEN", "false"),
        )


@dataclass
class ApiSettings:
    """API server settings."""
    host: str = "127.0.0.1"
    port: int = 8000
    
    @classmethod
    def from_env(cls) -> "ApiSettings":
        """Load API server settings from environment variables."""
        return cls(
            host=os.getenv("TIDYDESK_HOST", "127.0.0.1"),
            port=_int_from_env("TIDYDESK_PORT", "8000"),
        )


@dataclass
class Settings:
    """Main settings class combining all configuration."""
    ollama: OllamaSettings
    organizer: OrganizerSettings
    api: ApiSettings
    
    @classmethod
    def from_env(cls) -> "Settings":
        """Load all settings from environment variables."""
        return cls(
            ollama=OllamaSettings.from_env(),
            organizer=OrganizerSettings.from_env(),
            api=ApiSettings.from_env(),
        )


# Global settings instance
settings = Settings.from_env()

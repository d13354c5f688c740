"""
Configuration loading for the generation gateway.

Settings come from an INI file (``config.ini``) read with configparser.
Provider credentials may also be supplied through the process
environment, which takes precedence over the file.
"""

import os
import configparser
import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Dict, Any, Optional, Mapping

logger = logging.getLogger(__name__)


DEFAULT_OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

# INI key -> environment variable that overrides it
CREDENTIAL_ENV_VARS = {
    "openai_api_key": "OPENAI_API_KEY",
    "anthropic_api_key": "ANTHROPIC_API_KEY",
    "google_api_key": "GOOGLE_API_KEY",
    "openrouter_api_key": "OPENROUTER_API_KEY",
}


@dataclass
class GenerationSettings:
    """Tunable orchestration constants"""
    batch_size: int = 6
    batch_cooldown_ms: int = 100
    max_retries: int = 3
    retry_base_delay_ms: int = 1000
    retry_max_delay_ms: int = 5000
    request_deadline_seconds: float = 95.0
    default_temperature: float = 0.7
    default_max_tokens: int = 1000

    def retry_delay_ms(self, retry_count: int) -> int:
        """Backoff before the next attempt: 1s, 2s, 4s, capped at 5s by default"""
        return min(self.retry_base_delay_ms * (2 ** retry_count), self.retry_max_delay_ms)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ProviderCredentials:
    """Provider secrets; a provider is only constructed when its key is set"""
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    google_api_key: Optional[str] = None
    openrouter_api_key: Optional[str] = None
    openrouter_base_url: str = DEFAULT_OPENROUTER_BASE_URL
    request_timeout: float = 60.0

    def __repr__(self) -> str:
        configured = [key for key in CREDENTIAL_ENV_VARS if getattr(self, key)]
        return f"ProviderCredentials(configured={configured})"


@dataclass
class GatewayConfig:
    """Complete runtime configuration"""
    credentials: ProviderCredentials = field(default_factory=ProviderCredentials)
    generation: GenerationSettings = field(default_factory=GenerationSettings)


# Schema for [GENERATION_CONFIG]: key -> (type, validation, description)
GENERATION_SCHEMA = {
    "batch_size": (int, lambda x: x >= 1, "Maximum concurrent calls per chunk"),
    "batch_cooldown_ms": (int, lambda x: x >= 0, "Pause between chunks in milliseconds"),
    "max_retries": (int, lambda x: x >= 0, "Retries after the first failed attempt"),
    "retry_base_delay_ms": (int, lambda x: x >= 0, "Initial backoff in milliseconds"),
    "retry_max_delay_ms": (int, lambda x: x >= 0, "Backoff cap in milliseconds"),
    "request_deadline_seconds": (float, lambda x: x > 0, "Overall wall-clock budget per request"),
    "default_temperature": (float, lambda x: 0.0 <= x <= 2.0, "Temperature when none is requested"),
    "default_max_tokens": (int, lambda x: x >= 1, "Output budget when none is requested"),
}


def _clean_secret(value: Optional[str]) -> Optional[str]:
    """Treat blank and placeholder values as absent"""
    if not value or not value.strip():
        return None
    value = value.strip()
    if value.startswith("your_") and value.endswith("_here"):
        return None
    return value


def _parse_generation_settings(section: Optional[configparser.SectionProxy]) -> GenerationSettings:
    settings = GenerationSettings()
    if section is None:
        return settings

    errors = []
    for key, (value_type, validation, description) in GENERATION_SCHEMA.items():
        raw_value = section.get(key)
        if raw_value is None or not raw_value.strip():
            continue
        try:
            value = value_type(raw_value.strip())
        except (TypeError, ValueError):
            errors.append(f"Invalid {value_type.__name__} value for {key}: {raw_value}")
            continue
        if not validation(value):
            errors.append(f"Invalid value for {key} ({description}): {raw_value}")
            continue
        setattr(settings, key, value)

    if errors:
        raise ValueError("Generation configuration errors:\n" + "\n".join(errors))
    return settings


def _parse_credentials(section: Optional[configparser.SectionProxy], environ: Mapping[str, str]) -> ProviderCredentials:
    credentials = ProviderCredentials()

    for key, env_var in CREDENTIAL_ENV_VARS.items():
        file_value = section.get(key) if section is not None else None
        value = _clean_secret(environ.get(env_var)) or _clean_secret(file_value)
        setattr(credentials, key, value)

    if section is not None:
        base_url = section.get("openrouter_base_url", "").strip()
        if base_url:
            credentials.openrouter_base_url = base_url
        timeout = section.get("request_timeout", "").strip()
        if timeout:
            try:
                credentials.request_timeout = float(timeout)
            except ValueError:
                raise ValueError(f"Invalid float value for request_timeout: {timeout}")
            if credentials.request_timeout <= 0:
                raise ValueError(f"request_timeout must be positive, got {timeout}")

    return credentials


def load_config(config_file: str = "config.ini", environ: Optional[Mapping[str, str]] = None) -> GatewayConfig:
    """Load configuration from INI file and environment.

    Args:
        config_file: Path to configuration file; a missing file is allowed
        environ: Environment mapping (defaults to ``os.environ``)

    Returns:
        GatewayConfig: Parsed credentials and generation settings

    Raises:
        ValueError: If a configured value fails validation
    """
    if environ is None:
        environ = os.environ

    config = configparser.ConfigParser()
    config_path = Path(config_file)
    if config_path.exists():
        config.read(config_path)
        logger.info(f"Loaded configuration from {config_path}")
    else:
        logger.info(f"Configuration file {config_path} not found, using environment and defaults")

    provider_section = config["PROVIDER_CONFIGS"] if config.has_section("PROVIDER_CONFIGS") else None
    generation_section = config["GENERATION_CONFIG"] if config.has_section("GENERATION_CONFIG") else None

    return GatewayConfig(
        credentials=_parse_credentials(provider_section, environ),
        generation=_parse_generation_settings(generation_section),
    )

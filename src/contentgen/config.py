"""Generator configuration: the consumed config shape, env resolution, YAML settings."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from contentgen.core.interface.catalog import (
    DEFAULT_ANTHROPIC_MODEL,
    DEFAULT_LM_STUDIO_MODEL,
    DEFAULT_LOCAL_LLM_MODEL,
    is_known_model,
)
from contentgen.errors import ConfigurationError

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"


class GeneratorConfig(BaseModel):
    """Configuration owned by exactly one generator; immutable once built.

    ``timeout`` is in seconds. ``capabilities`` overrides individual
    backend flags (see :class:`~contentgen.core.interface.capabilities.BackendCapabilities`).
    """

    model_config = ConfigDict(frozen=True)

    model: str
    api_key: str | None = None
    base_url: str | None = None
    timeout: float | None = None
    custom_headers: dict[str, str] = Field(default_factory=lambda: dict[str, str]())
    api_version: str | None = None
    capabilities: dict[str, bool] = Field(default_factory=lambda: dict[str, bool]())

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str | None) -> str | None:
        return value.rstrip("/") if value else value

    @classmethod
    def from_env(
        cls,
        provider: str,
        model: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> GeneratorConfig:
        """Resolve a config for *provider* from environment variables.

        *model* is the caller's preference; a provider-specific model
        variable wins over it where one exists. ``CUSTOM_TIMEOUT`` is read
        in milliseconds.

        Raises:
            ConfigurationError: If a required variable is missing or malformed.
        """
        env = os.environ if env is None else env
        base_url = env.get("CUSTOM_BASE_URL") or None
        timeout = _timeout_seconds(env.get("CUSTOM_TIMEOUT"))

        if provider == "openai-compatible":
            api_key = _require(env, "OPENAI_API_KEY", provider)
            return cls(
                model=env.get("OPENAI_MODEL") or model or DEFAULT_OPENAI_MODEL,
                api_key=api_key,
                base_url=base_url,
                timeout=timeout,
            )

        if provider == "anthropic":
            api_key = _require(env, "ANTHROPIC_API_KEY", provider)
            preferred = env.get("ANTHROPIC_MODEL") or DEFAULT_ANTHROPIC_MODEL
            if not is_known_model("anthropic", preferred):
                preferred = DEFAULT_ANTHROPIC_MODEL
            selected = model if model and is_known_model("anthropic", model) else preferred
            return cls(model=selected, api_key=api_key, timeout=timeout)

        if provider == "local-llm":
            return cls(
                model=env.get("LOCAL_LLM_MODEL") or model or DEFAULT_LOCAL_LLM_MODEL,
                api_key=env.get("LOCAL_LLM_API_KEY") or None,
                base_url=base_url,
                timeout=timeout,
            )

        if provider == "lm-studio":
            return cls(
                model=model or DEFAULT_LM_STUDIO_MODEL,
                api_key=env.get("LM_STUDIO_API_KEY") or None,
                base_url=base_url,
                timeout=timeout,
            )

        if provider == "azure":
            missing = [k for k in ("AZURE_API_KEY", "AZURE_ENDPOINT_URL", "AZURE_API_VERSION") if not env.get(k)]
            if missing:
                msg = "AZURE_API_KEY, AZURE_ENDPOINT_URL, and AZURE_API_VERSION must be set for the azure provider"
                raise ConfigurationError(msg)
            if not model:
                raise ConfigurationError("A deployment name (model) is required for the azure provider")
            return cls(
                model=model,
                api_key=env["AZURE_API_KEY"],
                base_url=env["AZURE_ENDPOINT_URL"],
                api_version=env["AZURE_API_VERSION"],
                timeout=timeout,
            )

        if not model:
            raise ConfigurationError(f"A model is required for provider {provider!r}")
        return cls(model=model, base_url=base_url, timeout=timeout)


def _require(env: Mapping[str, str], key: str, provider: str) -> str:
    value = env.get(key)
    if not value:
        raise ConfigurationError(f"{key} environment variable is required for the {provider} provider")
    return value


def _timeout_seconds(raw: str | None) -> float | None:
    if not raw:
        return None
    try:
        return int(raw) / 1000
    except ValueError as exc:
        raise ConfigurationError(f"CUSTOM_TIMEOUT must be an integer number of milliseconds, got {raw!r}") from exc


# ---------------------------------------------------------------------------
# YAML settings file
# ---------------------------------------------------------------------------


class Settings(BaseModel):
    """Top-level settings file: which provider to use and how."""

    provider: str = "openai-compatible"
    generator: GeneratorConfig | None = None
    tool_discovery_command: str | None = None


def load_settings(path: Path) -> Settings:
    """Read a YAML settings file, interpolate env vars, and validate.

    Environment variables in the form ``${VAR}`` or ``$VAR`` are expanded
    using :func:`os.path.expandvars` before YAML parsing.

    Raises:
        ConfigurationError: On read errors, YAML parse errors or schema
            validation failures.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read {path}: {exc}") from exc

    expanded = os.path.expandvars(raw)

    try:
        data: Any = yaml.safe_load(expanded)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"YAML parse error: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError("Settings YAML must be a mapping")

    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc

"""Application configuration handling."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

ENV_PREFIX = "LEGALQA_"
DEFAULT_CONFIG_PATH = Path("~/.config/legal-qa/config.yaml")

_YAML_KEY_MAP: Mapping[tuple[str, ...], str] = {
    ("openai", "api_key"): "openai_api_key",
    ("openai", "embedding_model"): "embedding_model",
    ("openai", "chat_model"): "chat_model",
    ("openai", "temperature"): "chat_temperature",
    ("pinecone", "api_key"): "pinecone_api_key",
    ("pinecone", "index_name"): "pinecone_index_name",
    ("retrieval", "top_k"): "default_top_k",
    ("retrieval", "min_score"): "default_min_score",
    ("retrieval", "overfetch_factor"): "overfetch_factor",
    ("logging", "level"): "log_level",
    ("logging", "json"): "log_json",
    ("logging", "dir"): "log_dir",
    ("server", "environment"): "environment",
    ("server", "cors_origins"): "cors_origins",
}

# Unprefixed variable names used by the deployment environment.
_ENV_ALIASES: Mapping[str, str] = {
    "OPENAI_API_KEY": "openai_api_key",
    "PINECONE_KEY": "pinecone_api_key",
    "PINECONE_INDEX_NAME": "pinecone_index_name",
    "APP_ENV": "environment",
    "CORS_ORIGIN_LIST": "cors_origins",
}


class Settings(BaseModel):
    """Runtime configuration loaded from YAML file and environment variables."""

    environment: str = "dev"
    openai_api_key: str | None = None
    embedding_model: str = "text-embedding-3-small"
    chat_model: str = "gpt-4o-mini"
    chat_temperature: float = Field(default=0.1, ge=0.0, le=2.0)
    pinecone_api_key: str | None = None
    pinecone_index_name: str = "smart-chatbot"
    default_top_k: int = Field(default=5, ge=1)
    default_min_score: float = Field(default=0.7, ge=0.0, le=1.0)
    overfetch_factor: int = Field(default=2, ge=1)
    log_level: str = "INFO"
    log_json: bool = True
    log_dir: Path | None = None
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    model_config = {
        "validate_assignment": True,
        "extra": "ignore",
    }

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in {"prod", "production"}

    @field_validator("openai_api_key", "pinecone_api_key", mode="before")
    @classmethod
    def _blank_key_is_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("log_dir", mode="before")
    @classmethod
    def _expand_log_dir(cls, value: Any) -> Path | None:
        if value is None or value == "":
            return None
        if isinstance(value, Path):
            return value.expanduser()
        if isinstance(value, str):
            return Path(value).expanduser()
        raise TypeError("log_dir must be a path or string")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @classmethod
    def from_yaml(cls, path: Path | None = None) -> "Settings":
        """Build settings from the config file, then deployment and LEGALQA_ variables."""
        config_path = cls._resolve_config_path(path)
        data = load_yaml_config(config_path) if config_path is not None else {}
        data.update(_load_env_overrides())
        return cls(**data)

    @staticmethod
    def _resolve_config_path(path: Path | None) -> Path | None:
        if path is not None:
            return path.expanduser()
        env_path = os.environ.get(f"{ENV_PREFIX}CONFIG")
        if env_path:
            return Path(env_path).expanduser()
        resolved_default = DEFAULT_CONFIG_PATH.expanduser()
        return resolved_default if resolved_default.exists() else None


def load_yaml_config(path: Path) -> dict[str, Any]:
    """Read a YAML config file into Settings field names; a missing file yields nothing."""
    if not path.is_file():
        logger.warning("Config file %s not found; using defaults", path)
        return {}
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"Config file {path} must contain a mapping")
    return _flatten_yaml(raw)


def _flatten_yaml(raw: Mapping[str, Any], prefix: tuple[str, ...] = ()) -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for key, value in raw.items():
        key_path = prefix + (str(key),)
        if isinstance(value, Mapping):
            flat.update(_flatten_yaml(value, prefix=key_path))
            continue
        field_name = _YAML_KEY_MAP.get(key_path)
        if field_name is None and len(key_path) == 1 and key_path[0] in Settings.model_fields:
            field_name = key_path[0]
        if field_name is None:
            logger.warning("Ignoring unknown config key %s", ".".join(key_path))
            continue
        flat[field_name] = value
    return flat


def _load_env_overrides() -> dict[str, Any]:
    """Map vendor variables and LEGALQA_-prefixed variables into Settings fields.

    Prefixed variables are applied last so they win over the vendor names.
    """
    overrides: dict[str, Any] = {}
    for env_name, field_name in _ENV_ALIASES.items():
        value = os.environ.get(env_name)
        if value is not None:
            overrides[field_name] = value
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field_name = key[len(ENV_PREFIX) :].lower()
        if field_name in Settings.model_fields:
            overrides[field_name] = value
    return overrides


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings accessor for dependency injection."""
    return Settings.from_yaml()


__all__ = ["Settings", "get_settings", "load_yaml_config"]

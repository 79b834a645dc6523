"""Configuration of the Shuttle CLI.

The resolved :class:`Configuration` is built on every invocation from four
layers, lowest precedence first:

1. built-in defaults;
2. the JSON file (``~/.weft/config.json`` unless ``--config`` says otherwise);
3. environment variables, read with pydantic-settings;
4. the per-invocation ``--project`` override.

Each layer is an immutable partial mapping keyed by the file's camelCase
names. A layer only ever supplies values: ``None`` is dropped before merging,
so it can never unset what a lower layer resolved.
"""

from __future__ import annotations

import json
import logging
from collections import ChainMap
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from shuttle.core.domain.vocabulary import OutputFormat, TransportKind
from shuttle.core.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_NATS_URL = "nats://localhost:4222"
DEFAULT_PROJECT_ID = "default"
DEFAULT_PRIORITY = 5
NATS_SCHEME = "nats://"

DEFAULTS: Mapping[str, Any] = MappingProxyType(
    {
        "natsUrl": DEFAULT_NATS_URL,
        "projectId": DEFAULT_PROJECT_ID,
        "defaultPriority": DEFAULT_PRIORITY,
        "outputFormat": OutputFormat.TABLE.value,
    }
)


@lru_cache(maxsize=1)
def default_config_path() -> Path:
    """``~/.weft/config.json``, computed once per process."""

    return Path.home() / ".weft" / "config.json"


class Configuration(BaseModel):
    """Resolved CLI configuration.

    Frozen: the only way to change a value is :func:`set_config_value`, which
    rewrites the file; the next :func:`load_config` picks it up.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    nats_url: str = Field(
        default=DEFAULT_NATS_URL,
        alias="natsUrl",
        description="NATS server URL (nats://host:port).",
    )
    project_id: str = Field(
        default=DEFAULT_PROJECT_ID,
        alias="projectId",
        description="Project that scopes every subject and request.",
    )
    nats_credentials: str | None = Field(
        default=None,
        alias="natsCredentials",
        description="Path to a NATS .creds file.",
    )
    default_boundary: str | None = Field(default=None, alias="defaultBoundary")
    default_priority: int | None = Field(default=DEFAULT_PRIORITY, alias="defaultPriority")
    output_format: str | None = Field(default=OutputFormat.TABLE.value, alias="outputFormat")
    api_url: str | None = Field(
        default=None,
        alias="apiUrl",
        description="Base URL of the coordinator REST API.",
    )
    api_token: str | None = Field(
        default=None,
        alias="apiToken",
        description="Bearer token for the REST API.",
    )
    transport: str | None = Field(
        default=None,
        description="Force a transport binding (http|nats).",
    )

    def to_file_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# camelCase file key -> attribute name
CONFIG_KEYS: Mapping[str, str] = MappingProxyType(
    {field.alias or name: name for name, field in Configuration.model_fields.items()}
)
_ATTRIBUTE_KEYS: Mapping[str, str] = MappingProxyType({v: k for k, v in CONFIG_KEYS.items()})


class EnvironmentLayer(BaseSettings):
    """Environment variables recognised by Shuttle, one field each."""

    model_config = SettingsConfigDict(
        extra="ignore",
        case_sensitive=False,
        env_ignore_empty=True,
    )

    nats_url: str | None = Field(default=None, validation_alias="NATS_URL")
    project_id: str | None = Field(default=None, validation_alias="PROJECT_ID")
    api_url: str | None = Field(default=None, validation_alias="WEFT_API_URL")
    api_token: str | None = Field(default=None, validation_alias="WEFT_API_TOKEN")

    def as_layer(self) -> Mapping[str, Any]:
        values = self.model_dump(exclude_none=True)
        return MappingProxyType({_ATTRIBUTE_KEYS[name]: value for name, value in values.items()})


@dataclass(frozen=True)
class LoadOptions:
    config_path: str | Path | None = None
    project_override: str | None = None


def normalize_key(key: str) -> str:
    """Map a camelCase or snake_case key to the file's camelCase name."""

    if key in CONFIG_KEYS:
        return key
    if key in _ATTRIBUTE_KEYS:
        return _ATTRIBUTE_KEYS[key]
    raise ConfigError(
        f"Unknown configuration key: {key}",
        hint=f"Valid keys: {', '.join(CONFIG_KEYS)}",
    )


def _resolve_path(path: str | Path | None) -> Path:
    if path is None or str(path) == "":
        return default_config_path()
    return Path(path).expanduser()


def read_config_file(path: str | Path | None = None) -> dict[str, Any]:
    """Raw object stored in the config file; ``{}`` when the file is missing."""

    config_path = _resolve_path(path)
    if not config_path.exists():
        logger.debug("No config file at %s", config_path)
        return {}
    try:
        raw = config_path.read_text(encoding="utf-8")
        data = json.loads(raw) if raw.strip() else {}
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in config file {config_path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {config_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a JSON object")
    return data


def _file_layer(path: Path) -> Mapping[str, Any]:
    data = read_config_file(path)
    return MappingProxyType({k: v for k, v in data.items() if k in CONFIG_KEYS and v is not None})


def _override_layer(project_override: str | None) -> Mapping[str, Any]:
    if project_override and project_override.strip():
        return MappingProxyType({"projectId": project_override.strip()})
    return MappingProxyType({})


def resolve_layers(*layers: Mapping[str, Any]) -> dict[str, Any]:
    """Merge layers given lowest precedence first; the last layer defining a key wins."""

    return dict(ChainMap(*reversed(layers)))


def load_config(source: str | Path | LoadOptions | None = None) -> Configuration:
    """Resolve the configuration for this invocation."""

    options = source if isinstance(source, LoadOptions) else LoadOptions(config_path=source)
    path = _resolve_path(options.config_path)

    merged = resolve_layers(
        DEFAULTS,
        _file_layer(path),
        EnvironmentLayer().as_layer(),
        _override_layer(options.project_override),
    )
    try:
        config = Configuration.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid value in config file {path}: {exc}") from exc
    logger.debug("Configuration resolved from %s: project=%s", path, config.project_id)
    return config


def save_config(partial: Mapping[str, Any], path: str | Path | None = None) -> Path:
    """Merge ``partial`` on top of the stored object and write it back."""

    config_path = _resolve_path(path)
    existing = read_config_file(config_path)
    existing.update({normalize_key(k): v for k, v in partial.items() if v is not None})

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(existing, indent=2) + "\n", encoding="utf-8")
    logger.info("Saved configuration to %s", config_path)
    return config_path


def get_config_value(key: str, source: str | Path | LoadOptions | None = None) -> Any:
    name = CONFIG_KEYS[normalize_key(key)]
    return getattr(load_config(source), name)


def coerce_value(key: str, value: Any) -> Any:
    """Convert a CLI string into the type stored for ``key``."""

    key = normalize_key(key)
    if key == "defaultPriority" and isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as exc:
            raise ConfigError(f"defaultPriority must be an integer, got {value!r}") from exc
    return value


def set_config_value(key: str, value: Any, path: str | Path | None = None) -> Path:
    key = normalize_key(key)
    return save_config({key: coerce_value(key, value)}, path)


def list_config(source: str | Path | LoadOptions | None = None) -> Configuration:
    return load_config(source)


def validate_config(candidate: Any) -> list[str]:
    """Return every violated rule, in a fixed order. Never raises."""

    if isinstance(candidate, Configuration):
        values: Mapping[str, Any] = candidate.to_file_dict()
    elif isinstance(candidate, Mapping):
        values = {_ATTRIBUTE_KEYS.get(str(k), str(k)): v for k, v in candidate.items()}
    else:
        return ["configuration must be an object"]

    errors: list[str] = []

    nats_url = values.get("natsUrl")
    if nats_url is not None and not (isinstance(nats_url, str) and nats_url.startswith(NATS_SCHEME)):
        errors.append(f"natsUrl must start with {NATS_SCHEME}")

    priority = values.get("defaultPriority")
    if priority is not None and (
        isinstance(priority, bool) or not isinstance(priority, int) or not 1 <= priority <= 10
    ):
        errors.append("defaultPriority must be between 1 and 10")

    boundary = values.get("defaultBoundary")
    if boundary is not None and not (isinstance(boundary, str) and boundary.strip()):
        errors.append("defaultBoundary must be a non-empty string")

    output_format = values.get("outputFormat")
    if output_format is not None and output_format not in OutputFormat.values():
        errors.append('outputFormat must be either "table" or "json"')

    transport = values.get("transport")
    if transport is not None and transport not in TransportKind.values():
        errors.append('transport must be either "http" or "nats"')

    return errors


def ensure_valid(config: Configuration) -> Configuration:
    errors = validate_config(config)
    if errors:
        raise ConfigError("Invalid configuration: " + "; ".join(errors), violations=errors)
    return config

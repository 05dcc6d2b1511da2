"""Service configuration.

Settings come from environment variables, optionally layered over a YAML
file named by ``SGF_SERVICE_CONFIG``. Environment variables win over the
file so container deployments can override a baked-in config.

Environment Variables:
    SGF_SERVICE_CONFIG: Path to a YAML settings file
    SGF_SERVICE_MAX_SGF_BYTES: Maximum SGF payload size in bytes (default: 102400)
    SGF_SERVICE_MAX_BOARD_SIZE: Largest board the renderer accepts (default: 361)
    SGF_SERVICE_MAX_MOVE_INDEX: Largest move index accepted by the schema (default: 1000)
    SGF_SERVICE_LOG_LEVEL: Logging level name (default: INFO)
    SGF_SERVICE_PORT: Port used by ``python -m sgf_service.main`` (default: 8002)
    CORS_ORIGINS: Comma separated list of allowed origins (default: *)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

MAX_BOARD_SIZE = 361
MIN_DIMENSION = 100
MAX_DIMENSION = 2000
DEFAULT_DIMENSION = 600
DEFAULT_MAX_SGF_BYTES = 100 * 1024
DEFAULT_MAX_MOVE_INDEX = 1000

_ENV_PREFIX = "SGF_SERVICE_"


@dataclass(frozen=True)
class ServiceSettings:
    """Immutable process configuration."""
    max_sgf_bytes: int = DEFAULT_MAX_SGF_BYTES
    max_board_size: int = MAX_BOARD_SIZE
    max_move_index: int = DEFAULT_MAX_MOVE_INDEX
    log_level: str = "INFO"
    port: int = 8002
    cors_origins: tuple[str, ...] = ("*",)

    def __post_init__(self) -> None:
        if self.max_sgf_bytes < 1:
            raise ConfigurationError(
                "max_sgf_bytes must be positive",
                details={"max_sgf_bytes": self.max_sgf_bytes},
            )
        if not 1 <= self.max_board_size <= MAX_BOARD_SIZE:
            raise ConfigurationError(
                f"max_board_size must be between 1 and {MAX_BOARD_SIZE}",
                details={"max_board_size": self.max_board_size},
            )
        if self.max_move_index < 0:
            raise ConfigurationError(
                "max_move_index must be non-negative",
                details={"max_move_index": self.max_move_index},
            )
        if logging.getLevelName(self.log_level.upper()) == f"Level {self.log_level.upper()}":
            raise ConfigurationError(
                f"Unknown log level: {self.log_level}",
                details={"log_level": self.log_level},
            )


def _coerce(name: str, raw: Any, target: type) -> Any:
    if target is tuple:
        if isinstance(raw, (list, tuple)):
            return tuple(str(item).strip() for item in raw)
        return tuple(part.strip() for part in str(raw).split(",") if part.strip())
    if target is int:
        try:
            return int(raw)
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"Setting {name} must be an integer, got {raw!r}",
                details={name: raw},
            ) from None
    return str(raw)


def _field_types() -> dict[str, type]:
    types: dict[str, type] = {}
    for f in fields(ServiceSettings):
        annotation = str(f.type)
        if annotation.startswith("tuple"):
            types[f.name] = tuple
        elif annotation == "int":
            types[f.name] = int
        else:
            types[f.name] = str
    return types


def load_yaml_settings(path: str | Path) -> dict[str, Any]:
    """Read a YAML mapping of setting names to values."""
    config_path = Path(path)
    try:
        data = yaml.safe_load(config_path.read_text()) or {}
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read config file {config_path}: {e}",
            details={"path": str(config_path)},
        ) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in config file {config_path}: {e}",
            details={"path": str(config_path)},
        ) from e
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file {config_path} must contain a mapping",
            details={"path": str(config_path)},
        )
    return data


def load_settings(environ: Mapping[str, str] | None = None) -> ServiceSettings:
    """Build settings from YAML (if configured) and environment variables."""
    env = os.environ if environ is None else environ
    types = _field_types()
    values: dict[str, Any] = {}

    config_path = env.get(f"{_ENV_PREFIX}CONFIG")
    if config_path:
        for key, raw in load_yaml_settings(config_path).items():
            if key not in types:
                raise ConfigurationError(
                    f"Unknown setting in {config_path}: {key}",
                    details={"setting": key},
                )
            values[key] = _coerce(key, raw, types[key])

    for name, target in types.items():
        env_name = "CORS_ORIGINS" if name == "cors_origins" else f"{_ENV_PREFIX}{name.upper()}"
        raw = env.get(env_name)
        if raw is not None and raw != "":
            values[name] = _coerce(env_name, raw, target)

    settings = replace(ServiceSettings(), **values)
    logger.debug("Loaded settings: %s", settings)
    return settings

"""YAML config loader — parses, interpolates env vars, validates, and emits observer events."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from cert_desk.config.domain.config import AppConfig
from cert_desk.config.domain.observer import ConfigObserver
from cert_desk.config.infrastructure.env_interpolation import (
    collect_missing_vars,
    interpolate,
)
from cert_desk.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    MissingEnvVarsError,
)


def load_config(path: Path, observer: ConfigObserver) -> AppConfig:
    """
    Load, interpolate, validate, and return an AppConfig from a YAML file.

    Raises:
        ConfigLoadError: if the file is missing or is not valid YAML.
        MissingEnvVarsError: if any ${ENV_VAR} references are unset (all collected first).
        ConfigValidationError: if the schema is violated.
    """
    raw = _parse_yaml(path=path)
    missing = collect_missing_vars(raw)
    if missing:
        raise MissingEnvVarsError(missing)
    cfg = _build_config(resolved=interpolate(raw))
    if cfg.oracle.temperature > 0.0:
        observer.config_oracle_temperature_warning(cfg.oracle.temperature)
    observer.config_loaded(path=str(path), persistence_kind=cfg.persistence.kind)
    return cfg


def _parse_yaml(path: Path) -> Any:
    if not path.is_file():
        raise ConfigLoadError(path=path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            return yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ConfigLoadError(path=path, reason=f"invalid YAML ({exc})") from exc


def _build_config(resolved: Any) -> AppConfig:
    if not isinstance(resolved, dict):
        raise ConfigValidationError("top level must be a mapping")
    try:
        return AppConfig.model_validate(resolved)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc

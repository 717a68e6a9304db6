"""Load ``config.yaml`` with environment placeholders filled in.

Placeholders:
    ``${NAME}``            the variable must be set
    ``${NAME:-default}``   ``default`` when the variable is unset
    ``${NAME:?message}``   the variable must be set; ``message`` explains why
"""

import os
import re
from pathlib import Path

import yaml
from loguru import logger
from pydantic import ValidationError

from src.muslimhunt.runtime.config.config_data import ConfigData
from src.muslimhunt.runtime.config.settings import EnvironmentVariables

PLACEHOLDER = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?:(?P<op>:-|:\?)(?P<arg>[^}]*))?\}")


def _resolve(match: re.Match) -> str:
    name, op, arg = match.group("name", "op", "arg")
    value = os.environ.get(name)
    if value is not None:
        return value
    if op == ":-":
        return arg
    reason = arg if op == ":?" else "not set"
    raise ValueError(f"Required environment variable {name}: {reason}")


def substitute_env_vars(text: str) -> str:
    return PLACEHOLDER.sub(_resolve, text)


def apply_environment_overrides(env_mode: str) -> None:
    """Let ``PRODUCTION_DATABASE_URL`` stand in for ``DATABASE_URL`` when running in production."""
    prefix = f"{env_mode.upper()}_"
    for name, value in list(os.environ.items()):
        if name.startswith(prefix) and len(name) > len(prefix):
            os.environ[name[len(prefix):]] = value
            logger.debug("{} overridden by {}", name[len(prefix):], name)


def _parse(text: str) -> dict:
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e
    if not isinstance(document, dict) or "config" not in document:
        raise ValueError("Configuration file must have a top-level 'config' mapping")
    return document["config"] or {}


def _enabled_providers_only(config: ConfigData) -> ConfigData:
    disabled = [name for name, p in config.oauth.providers.items() if not p.enabled]
    for name in disabled:
        logger.info("OAuth provider {} is disabled", name)
        del config.oauth.providers[name]
    return config


def load_templated_yaml(file_path: Path) -> ConfigData:
    """Read, substitute and validate a configuration file.

    Raises:
        ValueError: For a missing variable, malformed YAML or invalid values
        FileNotFoundError: If ``file_path`` does not exist
    """
    env_mode = EnvironmentVariables().environment
    logger.info("Loading {} configuration from {}", env_mode, file_path)
    apply_environment_overrides(env_mode)

    raw = _parse(substitute_env_vars(Path(file_path).read_text()))
    try:
        config = ConfigData.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
    return _enabled_providers_only(config)


def load_default_config() -> ConfigData:
    return load_templated_yaml(Path(EnvironmentVariables().config_file))

"""Loading of ``config.yaml`` with environment placeholders.

Placeholders take three forms:

- ``${NAME}`` must be set
- ``${NAME:-fallback}`` uses ``fallback`` when ``NAME`` is unset
- ``${NAME:?hint}`` must be set; ``hint`` ends up in the error
"""

import os
import re
from pathlib import Path

import yaml
from loguru import logger
from pydantic_core import ValidationError

from src.catalog.runtime.config.config_data import ConfigData

_PLACEHOLDER = re.compile(r"\$\{(?P<name>[^}:]+)(?:(?P<op>:[-?])(?P<arg>[^}]*))?\}")


def _resolve_placeholder(match: re.Match) -> str:
    name, op, arg = match.group("name", "op", "arg")
    value = os.environ.get(name)
    if value is not None:
        return value
    if op == ":-":
        return arg
    if op == ":?":
        raise ValueError(f"Required environment variable {name}: {arg}")
    raise ValueError(f"Required environment variable {name} not set")


def substitute_env_vars(text: str) -> str:
    """Replace every ``${...}`` placeholder in ``text``.

    Raises:
        ValueError: If a required variable is unset
    """
    return _PLACEHOLDER.sub(_resolve_placeholder, text)


def apply_environment_overrides(env_mode: str) -> list[str]:
    """Promote ``<ENV>_``-prefixed variables to their unprefixed names.

    ``PRODUCTION_REDIS_URL`` becomes ``REDIS_URL`` when running in production.

    Returns:
        Names of the variables that were set
    """
    prefix = f"{env_mode.upper()}_"
    overrides = {
        name[len(prefix):]: value
        for name, value in os.environ.items()
        if name.startswith(prefix)
    }
    os.environ.update(overrides)
    return list(overrides)


def _warn_on_risky_storage(config: ConfigData) -> None:
    if config.app.environment != "production":
        return
    if config.storage.backend == "memory":
        logger.warning(
            "In-memory storage configured in production; the catalog will not survive a restart"
        )


def load_templated_yaml(file_path: Path) -> ConfigData:
    """Read the ``config:`` section of ``file_path`` into ``ConfigData``.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If a required variable is unset, the YAML is unreadable
            or the section does not validate
    """
    raw = Path(file_path).read_text()

    env_mode = os.getenv("APP_ENVIRONMENT", "development")
    promoted = apply_environment_overrides(env_mode)
    logger.info("Loading {} ({} environment, overrides: {})", file_path, env_mode, promoted)

    try:
        document = yaml.safe_load(substitute_env_vars(raw))
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e
    if not document:
        raise ValueError("Failed to parse YAML")

    try:
        config = ConfigData.model_validate(document.get("config") or {})
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    _warn_on_risky_storage(config)
    return config

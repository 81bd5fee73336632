"""Configuration loading for declared comment resources."""

import os
from pathlib import Path
from typing import Any, Literal, overload

import yaml
from loguru import logger
from pydantic_core import ValidationError

from src.app.runtime.config.config_data import ConfigData
from src.app.runtime.config.config_utils import substitute_env_vars

CONFIG_PATH = Path("config.yaml")


@overload
def load_config(file_path: Path = ..., *, processed: Literal[False]) -> dict[str, Any]: ...


@overload
def load_config(file_path: Path = ..., processed: Literal[True] = ...) -> ConfigData: ...


def load_config(
    file_path: Path = CONFIG_PATH, processed: bool = True
) -> ConfigData | dict[str, Any]:
    """
    Load a YAML file with environment variable substitution.

    Args:
        file_path: Path to the YAML file (default: config.yaml)
        processed: Whether to substitute environment variables and validate.
                  - True (default): substitute env vars and validate as ConfigData
                  - False: return raw dict without validation or substitution

    Returns:
        ConfigData if processed is True, raw dict if processed is False

    Raises:
        ValueError: If required environment variables are missing, validation fails,
                   or YAML structure is invalid (missing 'config' key)
        FileNotFoundError: If the YAML file doesn't exist

    YAML Structure Requirements:
        The YAML file must have a top-level 'config:' key containing configuration data.

    Environment-Specific Behavior:
        Reads APP_ENVIRONMENT (default: 'development') and applies overrides from
        environment variables prefixed with the uppercased environment name
        (e.g., PRODUCTION_PGHOST -> PGHOST) before substitution.
    """
    with open(file_path) as f:
        content = f.read()

    env_mode = os.getenv("APP_ENVIRONMENT", "development")

    if processed:
        logger.info(f"Loading configuration for environment: {env_mode}")

        prefix = f"{env_mode.upper()}_"
        env_variables = [
            (var, value) for var, value in os.environ.items() if var.startswith(prefix)
        ]
        logger.info(f"Applying {len(env_variables)} environment-specific overrides")
        logger.debug(f"Override keys: {[var for var, _ in env_variables]}")  # Log keys only

        for var_name, var_value in env_variables:
            new_var_name = var_name[len(prefix) :]
            os.environ[new_var_name] = var_value
            logger.debug(f"Set environment variable {new_var_name} from {var_name}")

        content = substitute_env_vars(content)

    try:
        loaded: dict[str, Any] = yaml.safe_load(content)
        if not processed:
            return loaded
        if not loaded:
            raise ValueError("Failed to parse YAML")
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e

    try:
        if "config" not in loaded:
            raise ValueError("Invalid YAML structure: missing 'config' key")
        config = ConfigData(**(loaded["config"] or {}))
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    logger.info(f"Loaded {len(config.comments)} declared comment(s)")
    return config

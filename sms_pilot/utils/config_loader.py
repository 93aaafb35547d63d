"""Configuration loader for the SMS Pilot client."""

import os
from pathlib import Path
from typing import Dict, Any, Union

import yaml

from ..client import DEFAULT_TIMEOUT, SmsPilotClient
from ..codes import AVAILABLE_LOCALES
from ..errors import InvalidAPIKeyError
from .logger import get_logger

logger = get_logger("sms_pilot.config")

PROJECT_ROOT = Path(__file__).parent.parent.parent
DEFAULT_CONFIG_PATH = "config/sms_pilot.yaml"


def load_yaml(filepath: Path) -> Dict[str, Any]:
    """Load YAML file and return as dictionary.

    Args:
        filepath: Path to YAML file.

    Returns:
        Dictionary with YAML contents, empty if the file is empty.

    Raises:
        FileNotFoundError: If file doesn't exist.
        yaml.YAMLError: If YAML is malformed.
    """
    if not filepath.exists():
        raise FileNotFoundError(f"Config file not found: {filepath}")

    try:
        with open(filepath, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Error parsing YAML file {filepath}: {e}")
        raise

    if config is None:
        logger.warning(f"YAML file is empty: {filepath}")
        return {}

    return config


def load_yaml_config(filepath: Union[str, Path]) -> Dict[str, Any]:
    """Load YAML file from string path or Path object.

    Relative paths are resolved against the current working directory.
    """
    path = Path(filepath)
    if not path.is_absolute():
        path = Path.cwd() / path
    return load_yaml(path)


def load_client_from_config(config_path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> SmsPilotClient:
    """Build a client from the ``sms_pilot`` section of a YAML config.

    ``SMS_PILOT_API_KEY``, ``SMS_PILOT_LOCALE`` and ``SMS_PILOT_TIMEOUT``
    override the file, so the key can stay out of the config in deployments.

    Raises:
        InvalidAPIKeyError: If neither the file nor the environment has a key.
    """
    path = Path(config_path)
    # The bundled example config is looked up in the source checkout when the
    # working directory has none
    if str(config_path) == DEFAULT_CONFIG_PATH and not (Path.cwd() / path).exists():
        path = PROJECT_ROOT / path

    cfg = load_yaml_config(path).get("sms_pilot", {}) or {}

    api_key = os.getenv("SMS_PILOT_API_KEY") or cfg.get("api_key") or ""
    locale = os.getenv("SMS_PILOT_LOCALE") or cfg.get("locale") or AVAILABLE_LOCALES[0]
    timeout = float(os.getenv("SMS_PILOT_TIMEOUT") or cfg.get("timeout") or DEFAULT_TIMEOUT)

    if not api_key:
        raise InvalidAPIKeyError(
            f"No API key in {config_path} and SMS_PILOT_API_KEY is not set"
        )

    logger.info(f"Loaded SMS Pilot client config from {config_path} (locale={locale})")
    return SmsPilotClient(api_key=str(api_key), locale=str(locale), timeout=timeout)

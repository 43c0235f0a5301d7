"""Configuration loading for the Dexcom Share client and service"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .client import DEXCOM_APPLICATION_ID

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / 'config.yaml'


def load_config_file(config_path: Union[str, Path, None] = None) -> Dict[str, Any]:
    """Read the dexcom_share section of config.yaml, empty if there is no file"""
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    if not path.exists():
        return {}
    with open(path, 'r') as f:
        config = yaml.safe_load(f) or {}
    if not isinstance(config, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    share_config = config.get('dexcom_share') or {}
    if not isinstance(share_config, dict):
        raise ValueError(f"dexcom_share section of {path} must be a mapping")
    return share_config


def _parse_timeout(value: Any) -> Optional[float]:
    if value in (None, ''):
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid timeout: {value!r}") from e
    if timeout <= 0:
        raise ValueError(f"Invalid timeout: {value!r}")
    return timeout


def get_share_config(config_path: Union[str, Path, None] = None) -> Dict[str, Any]:
    """Get Dexcom Share configuration from environment variables or config file"""
    # Environment variables win (container deployments)
    username = os.getenv('DEXCOM_USERNAME')
    password = os.getenv('DEXCOM_PASSWORD')
    region = os.getenv('DEXCOM_REGION')
    base_url = os.getenv('DEXCOM_BASE_URL')
    application_id = os.getenv('DEXCOM_APPLICATION_ID')
    timeout = os.getenv('DEXCOM_TIMEOUT')

    try:
        share_config = load_config_file(config_path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.warning(f"Could not load config file: {e}")
        share_config = {}

    username = username or share_config.get('username')
    password = password or share_config.get('password')
    region = region or share_config.get('region', 'us')
    base_url = base_url or share_config.get('base_url')
    application_id = application_id or share_config.get('application_id', DEXCOM_APPLICATION_ID)
    timeout = timeout or share_config.get('timeout')

    if not username or not password:
        raise ValueError(
            "Dexcom Share configuration not found. Set DEXCOM_USERNAME and DEXCOM_PASSWORD "
            "environment variables or configure in config.yaml"
        )

    return {
        'username': username,
        'password': password,
        'region': region,
        'base_url': base_url,
        'application_id': application_id,
        'timeout': _parse_timeout(timeout),
    }

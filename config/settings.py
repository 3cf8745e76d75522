"""Configuration management for the monthly budget dashboard."""

import os
import logging
from typing import Dict, Any
from pathlib import Path
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = 'http://localhost:5000/api'
DEFAULT_TIMEOUT = 30
DEFAULT_LOG_LEVEL = 'INFO'
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


def load_config() -> Dict[str, Any]:
    """
    Load configuration from environment variables and return structured config.

    Returns:
        Dict containing configuration sections for api and app settings.
    """
    # Load environment variables from .env file
    env_path = Path(__file__).parent.parent / '.env'
    if env_path.exists():
        load_dotenv(env_path)
        logger.info(f"Loaded configuration from {env_path}")
    else:
        logger.warning("No .env file found, using environment variables only")

    config = {
        'api': {
            'base_url': os.getenv('BUDGET_API_BASE_URL', DEFAULT_API_BASE_URL),
            'timeout': _int_env('BUDGET_API_TIMEOUT', DEFAULT_TIMEOUT),
        },
        'app': {
            'debug': os.getenv('DEBUG', 'False').lower() == 'true',
            'log_level': os.getenv('LOG_LEVEL', DEFAULT_LOG_LEVEL).upper(),
            'use_colors': os.getenv('CONSOLE_COLORS', 'True').lower() == 'true',
            'currency_label': os.getenv('CURRENCY_LABEL', 'R$'),
            # Empty means no PNG chart is written
            'chart_path': os.getenv('CHART_PATH', ''),
        }
    }

    _validate_config(config)

    return config


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == '':
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"{name}={raw!r} is not an integer; using {default}")
        return default


def _validate_config(config: Dict[str, Any]) -> None:
    """
    Validate that required configuration values are present.

    Args:
        config: Configuration dictionary to validate.

    Raises:
        ValueError: If required configuration is missing.
    """
    if not config['api']['base_url']:
        raise ValueError("BUDGET_API_BASE_URL missing; cannot proceed.")
    if config['api']['timeout'] <= 0:
        logger.warning(f"BUDGET_API_TIMEOUT must be positive; using {DEFAULT_TIMEOUT}")
        config['api']['timeout'] = DEFAULT_TIMEOUT
    if config['app']['log_level'] not in LOG_LEVELS:
        logger.warning(f"LOG_LEVEL={config['app']['log_level']!r} is not a known level; using {DEFAULT_LOG_LEVEL}")
        config['app']['log_level'] = DEFAULT_LOG_LEVEL
    if config['app']['debug']:
        config['app']['log_level'] = 'DEBUG'
    logger.info("Configuration validation completed")

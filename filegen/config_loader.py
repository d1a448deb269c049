"""
Configuration loading utilities for the file generator.

This module provides functionality to load and validate application
configuration from config.yaml with fallback to defaults, and to set up
logging from the configured level.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging
from copy import deepcopy

logger = logging.getLogger(__name__)

CONFIG_FILE = Path("config.yaml")

# Cache for the loaded configuration
_config_cache: Optional[Dict[str, Any]] = None


def deep_merge(base_dict: Dict[str, Any], update_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two dictionaries, with update_dict taking precedence.

    Args:
        base_dict: Base dictionary (defaults)
        update_dict: Dictionary to merge in (user config)

    Returns:
        Merged dictionary
    """
    result = deepcopy(base_dict)

    for key, value in update_dict.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = deepcopy(value)

    return result


def get_default_config() -> Dict[str, Any]:
    """
    Get default configuration.

    Returns:
        Dictionary with default configuration
    """
    return {
        'app': {
            'name': 'File Generator',
            'version': '1.0.0',
            'debug': False
        },
        'generation_service': {
            'base_url': 'http://localhost:5000',
            'endpoint': '/api/generate',
            'timeout': 30,
            'user_agent': 'FileGenerator/1.0'
        },
        'generation': {
            'default_file_type': 'json',
            'default_file_size': 1
        },
        'downloads': {
            'directory': 'downloads',
            'filename_stem': 'generated_file'
        },
        'logging': {
            'level': 'INFO',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        },
        'ui': {
            'page_title': 'File Generator'
        }
    }


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load application configuration.

    Args:
        config_path: Optional path to config file (defaults to config.yaml)

    Returns:
        Complete configuration dictionary, defaults merged with the file
    """
    if config_path is None:
        config_path = CONFIG_FILE

    default_config = get_default_config()

    if not config_path.exists():
        logger.warning(f"Configuration file not found: {config_path}")
        logger.info("Using default configuration")
        return default_config

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            user_config = yaml.safe_load(f)

        if user_config is None:
            logger.warning(f"Configuration file is empty: {config_path}")
            return default_config

        if not isinstance(user_config, dict):
            logger.error(f"Configuration file is not a valid dictionary: {config_path}")
            logger.info("Using default configuration")
            return default_config

        config = deep_merge(default_config, user_config)

        if not validate_config(config):
            logger.error(f"Configuration in {config_path} failed validation")
            logger.info("Using default configuration")
            return default_config

        logger.info(f"Successfully loaded configuration from {config_path}")
        return config

    except yaml.YAMLError as e:
        logger.error(f"YAML parsing error in {config_path}: {e}")
        logger.info("Using default configuration")
        return default_config

    except (IOError, OSError) as e:
        logger.error(f"Failed to read configuration file {config_path}: {e}")
        logger.info("Using default configuration")
        return default_config


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration structure and value types.

    Args:
        config: Configuration dictionary to validate

    Returns:
        True if configuration is valid, False otherwise
    """
    required_sections = ['app', 'generation_service', 'generation', 'downloads', 'logging', 'ui']

    for section in required_sections:
        if not isinstance(config.get(section), dict):
            logger.warning(f"Missing required configuration section: {section}")
            return False

    service = config['generation_service']
    for key in ('base_url', 'endpoint'):
        if not isinstance(service.get(key), str) or not service.get(key):
            logger.warning(f"generation_service.{key} must be a non-empty string")
            return False

    try:
        timeout = float(service.get('timeout', 30))
        if timeout <= 0:
            logger.warning("generation_service.timeout must be positive")
            return False
    except (ValueError, TypeError):
        logger.warning("generation_service.timeout must be a valid number")
        return False

    generation = config['generation']
    if str(generation.get('default_file_type', 'json')).lower() not in ('json', 'csv', 'xml'):
        logger.warning("generation.default_file_type must be one of json, csv, xml")
        return False

    if not isinstance(config['downloads'].get('directory'), str):
        logger.warning("downloads.directory must be a string")
        return False

    return True


def get_config() -> Dict[str, Any]:
    """Return the cached configuration, loading it on first use."""
    global _config_cache

    if _config_cache is None:
        _config_cache = load_config()
    return _config_cache


def reload_config() -> Dict[str, Any]:
    """Drop the cached configuration and load it again."""
    global _config_cache

    _config_cache = None
    return get_config()


def get_config_value(section: str, key: str, default: Any = None) -> Any:
    """
    Get a specific configuration value.

    Args:
        section: Configuration section (e.g., 'generation_service', 'ui')
        key: Configuration key within section
        default: Default value if not found

    Returns:
        Configuration value or default
    """
    config = get_config()
    return config.get(section, {}).get(key, default)


def get_logging_level(level_str: str) -> int:
    """Map string logging level to logging constant."""
    level_map = {
        'DEBUG': logging.DEBUG,
        'INFO': logging.INFO,
        'WARNING': logging.WARNING,
        'ERROR': logging.ERROR,
        'CRITICAL': logging.CRITICAL
    }
    return level_map.get(str(level_str).upper(), logging.INFO)


def configure_logging() -> int:
    """
    Configure root logging from the 'logging' config section.

    Returns:
        The logging level that was applied
    """
    level_str = get_config_value('logging', 'level', 'INFO')
    log_format = get_config_value('logging', 'format', get_default_config()['logging']['format'])
    level = get_logging_level(level_str)
    logging.basicConfig(level=level, format=log_format)
    logger.info(f"Logging configured to level: {level_str}")
    return level

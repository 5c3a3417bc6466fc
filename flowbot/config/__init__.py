"""Configuration module for flowbot."""

from flowbot.config.loader import get_config_path, load_config, save_config
from flowbot.config.schema import Config

__all__ = ["Config", "get_config_path", "load_config", "save_config"]

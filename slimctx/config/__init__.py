"""Configuration module for slimctx."""

from slimctx.config.loader import load_config, get_config_path
from slimctx.config.schema import Config

__all__ = ["Config", "load_config", "get_config_path"]

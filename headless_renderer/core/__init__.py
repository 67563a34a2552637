from .config import get_config, config_manager, ConfigurationManager, ConfigError, ConfigFileNotFoundError, InvalidYamlError
from .exceptions import (
    HeadlessRendererError,
    ConfigurationError,
    ComponentError,
    RendererError,
    EngineLaunchError,
    BadOptionsError,
    NavigationError,
    CaptureError,
    CloseError,
)
from .logger import setup_logging, get_logger

__all__ = [
    # Config
    "get_config",
    "config_manager",
    "ConfigurationManager",
    "ConfigError",
    "ConfigFileNotFoundError",
    "InvalidYamlError",
    # Logger
    "setup_logging",
    "get_logger",
    # Exceptions
    "HeadlessRendererError",
    "ConfigurationError",
    "ComponentError",
    "RendererError",
    "EngineLaunchError",
    "BadOptionsError",
    "NavigationError",
    "CaptureError",
    "CloseError",
]

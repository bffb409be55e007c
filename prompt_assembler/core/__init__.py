"""Core configuration and factory components."""

from prompt_assembler.core.config import ConfigurationError, Settings, get_settings
from prompt_assembler.core.factory import ComponentFactory

__all__ = [
    "ConfigurationError",
    "Settings",
    "get_settings",
    "ComponentFactory",
]

from .loader import get_config, get_config_path, load_plugin_configuration
from .settings import PluginConfiguration, VARIANTS
from .validator import ConfigValidationError, validate_config

__all__ = [
    "ConfigValidationError",
    "PluginConfiguration",
    "VARIANTS",
    "get_config",
    "get_config_path",
    "load_plugin_configuration",
    "validate_config",
]

"""Engine configuration models and loaders."""

from .loader import load_settings
from .schema import ConfigurationError, EngineSettings, MissingKeyHandler, build_settings

__all__ = [
    "ConfigurationError",
    "EngineSettings",
    "MissingKeyHandler",
    "build_settings",
    "load_settings",
]

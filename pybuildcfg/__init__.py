"""pybuildcfg: A validating loader for Android/Flutter build descriptors.

This package provides a loader that turns a declarative build descriptor
into an immutable, typed application configuration, plus a command-line
tool that checks the configuration before it is handed to a packaging step.
"""

from .core.errors import (
    ConfigError,
    DegradedSigningWarning,
    InvalidIdentifier,
    InvalidVersion,
    MissingField,
    PluginOrderError,
)
from .core.loader import load
from .core.model import FALLBACK, ApplicationConfig, BuildType, SigningConfig
from .core.plugins import resolve_plugins
from .core.signing import build_readiness, select_signing_config

__version__ = "0.1.0"
__license__ = "MIT"

__all__ = [
    "__version__",
    "__license__",
    "ApplicationConfig",
    "BuildType",
    "ConfigError",
    "DegradedSigningWarning",
    "FALLBACK",
    "InvalidIdentifier",
    "InvalidVersion",
    "MissingField",
    "PluginOrderError",
    "SigningConfig",
    "build_readiness",
    "load",
    "resolve_plugins",
    "select_signing_config",
]

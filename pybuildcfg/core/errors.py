"""Exceptions and warnings raised while loading a build descriptor.

Every loading failure derives from `ConfigError` and aborts the load. The
only recoverable condition is `DegradedSigningWarning`, which is emitted
through the `warnings` module when a release build has to fall back to
debug signing.
"""
from typing import Any, Optional


class ConfigError(Exception):
    """Base class for all descriptor loading and validation failures.

    Attributes:
        field (Optional[str]): The dotted descriptor path that caused the
            failure, when one can be named.
    """

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class MissingField(ConfigError):
    """A required descriptor field is absent."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Missing required field: {name}", field=name)
        self.name = name


class InvalidIdentifier(ConfigError):
    """An identifier does not follow the reverse-domain package grammar."""

    def __init__(self, field: str, value: Any) -> None:
        super().__init__(
            f"Invalid identifier for {field}: {value!r} "
            "(expected a dot-separated lowercase name such as 'com.example.app')",
            field=field,
        )
        self.value = value


class InvalidVersion(ConfigError):
    """A version, SDK level or language level is out of range."""

    def __init__(self, field: str, value: Any, reason: str) -> None:
        super().__init__(f"Invalid value for {field}: {value!r} ({reason})", field=field)
        self.value = value
        self.reason = reason


class PluginOrderError(ConfigError):
    """The declared plugin list breaks an ordering rule."""

    def __init__(self, message: str) -> None:
        super().__init__(message, field="plugins")


class DegradedSigningWarning(UserWarning):
    """A release build is being signed with the fallback (debug) identity."""

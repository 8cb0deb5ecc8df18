"""Chooses the signing identity for a build type.

A release build is signed with its configured credentials only when all
four of them are present. Otherwise it falls back to the debug identity, so
that a buildable artifact is still produced, and a `DegradedSigningWarning`
is emitted to say the artifact is not releasable.
"""
import logging
import warnings
from typing import Union

from .errors import ConfigError, DegradedSigningWarning
from .model import FALLBACK, ApplicationConfig, BuildReadiness, BuildType, Fallback, SigningConfig

logger = logging.getLogger(__name__)


def select_signing_config(config: ApplicationConfig, build_type: Union[BuildType, str]) -> Union[SigningConfig, Fallback]:
    """Returns the signing identity to use for `build_type`.

    Every fallback is logged. The `DegradedSigningWarning` goes through the
    active warning filters, so under Python's default filter it is shown once
    per calling line; callers that need every occurrence should install an
    ``"always"`` filter, as the CLI does.

    Args:
        config (ApplicationConfig): A loaded configuration.
        build_type (Union[BuildType, str]): ``release`` or ``debug``.

    Returns:
        Union[SigningConfig, Fallback]: The configured release block when it
        is complete and the build type is release, otherwise `FALLBACK`.

    Raises:
        ConfigError: If `build_type` is not a known build type.
    """
    try:
        build_type = BuildType(build_type)
    except ValueError:
        raise ConfigError(f"Unknown build type: {build_type!r}", field="buildType") from None

    if build_type is BuildType.DEBUG:
        return FALLBACK

    signing = config.signing
    if signing is not None and signing.is_complete:
        logger.debug(f"Using signing config '{signing.name}' for release build")
        return signing

    if signing is None:
        reason = "no release signing config is declared"
    else:
        reason = f"signing config '{signing.name}' is missing {', '.join(signing.missing_fields)}"
    message = f"Release build of {config.application_id} falls back to debug signing: {reason}"
    logger.warning(message)
    warnings.warn(DegradedSigningWarning(message), stacklevel=2)
    return FALLBACK


def build_readiness(config: ApplicationConfig) -> BuildReadiness:
    """Tells whether `config` can produce a release artifact or only a debug one."""
    if config.signing is not None and config.signing.is_complete:
        return BuildReadiness.RELEASE
    return BuildReadiness.DEBUG_ONLY

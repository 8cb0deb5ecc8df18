"""Reads descriptors and signing credentials from disk.

This module is the I/O boundary in front of the pure loader: it turns a
descriptor file (TOML, JSON or a Gradle Kotlin script) into a key/value tree,
and gathers the secrets that `${NAME}` references in that tree resolve to.
"""
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

try:
    import tomllib  # Available in Python 3.11+
except ImportError:
    import tomli as tomllib  # Fallback for Python versions < 3.11

from ..core.config import Config
from ..core.errors import ConfigError
from .gradle import parse_gradle_kts
from .properties import load_properties

logger = logging.getLogger(__name__)

GRADLE_SUFFIXES = (".kts", ".gradle")


def load_descriptor(path: Union[str, Path]) -> Dict[str, Any]:
    """Reads a descriptor file, choosing the parser from its suffix.

    Args:
        path (Union[str, Path]): A `.toml`, `.json`, `.gradle.kts` or
            `.gradle` file.

    Returns:
        Dict[str, Any]: The descriptor tree.

    Raises:
        ConfigError: If the file cannot be read or parsed, or its type is
            not supported.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in (".toml", ".json") + GRADLE_SUFFIXES:
        raise ConfigError(f"Unsupported descriptor type: {path.name}")

    try:
        if suffix == ".toml":
            with open(path, "rb") as f:
                data = tomllib.load(f)
        else:
            with open(path, "r", encoding="utf-8") as f:
                text = f.read()
            data = json.loads(text) if suffix == ".json" else parse_gradle_kts(text)
    except OSError as e:
        raise ConfigError(f"Could not read descriptor {path}: {e}") from e
    except (UnicodeDecodeError, tomllib.TOMLDecodeError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not parse descriptor {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Descriptor {path} must contain a mapping at the top level")
    logger.debug(f"Read descriptor from {path}")
    return data


def find_key_properties(config: Config, base_dir: Path, key_properties: Optional[Path] = None) -> Optional[Path]:
    """Locates the `key.properties` file holding signing credentials.

    An explicit path wins. Otherwise the configured file name is looked up in
    the module directory and then its parent, which is where Flutter projects
    keep it (`android/key.properties` next to `android/app/`).
    """
    if key_properties is not None:
        return Path(key_properties)

    name = config.get("signing.key_properties")
    if not name:
        return None
    for directory in (base_dir, base_dir.parent):
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def collect_secrets(config: Config, base_dir: Path, key_properties: Optional[Path] = None) -> Dict[str, str]:
    """Builds the secrets mapping handed to the loader.

    Environment variables are overlaid with the entries of the
    `key.properties` file, if one is found.

    Raises:
        ConfigError: If an explicitly requested properties file cannot be read.
    """
    secrets = dict(os.environ)
    path = find_key_properties(config, base_dir, key_properties)
    if path is None:
        logger.debug("No key.properties file found; using environment only")
        return secrets

    try:
        properties = load_properties(path)
    except OSError as e:
        raise ConfigError(f"Could not read signing properties {path}: {e}") from e
    logger.info(f"Loaded {len(properties)} signing properties from {path}")
    secrets.update(properties)
    return secrets

"""Runs the build-time validation pipeline for pybuildcfg.

This module orchestrates the checks that follow a successful load:
1.  Discovering all available `BaseValidator` implementations.
2.  Running all enabled validators concurrently against the loaded
    configuration.
3.  Aggregating their results into a single report.
"""

import inspect
import logging
import os
import pkgutil
from concurrent.futures import ThreadPoolExecutor
from importlib import import_module
from pathlib import Path
from typing import List, Dict, Any, Type, Optional

from .base_validator import BaseValidator
from .config import Config
from .model import ApplicationConfig
from .signing import build_readiness
from .. import validators as validators_package

# Initialize a logger for this module.
logger = logging.getLogger(__name__)


def discover_validators() -> List[Type[BaseValidator]]:
    """Discovers all validator classes within the `pybuildcfg.validators` package.

    This function iterates through the modules in the `validators` package,
    inspects their members, and collects all classes that are subclasses of
    `BaseValidator` (excluding `BaseValidator` itself).

    Returns:
        List[Type[BaseValidator]]: The discovered validator classes, sorted
        by name so that reports are stable.
    """
    validators = set()
    path = os.path.dirname(validators_package.__file__)

    for _, name, _ in pkgutil.iter_modules([path]):
        try:
            module = import_module(f"{validators_package.__name__}.{name}")
        except ImportError as e:
            logger.warning(f"Could not import validator module {name}: {e}")
            continue
        for _, item in inspect.getmembers(module, inspect.isclass):
            if issubclass(item, BaseValidator) and item is not BaseValidator and not inspect.isabstract(item):
                validators.add(item)
    return sorted(validators, key=lambda v: v.name)


def validate_config(
    app_config: ApplicationConfig,
    config: Config,
    base_dir: Optional[Path] = None,
) -> Dict[str, Any]:
    """Runs all enabled validators against a loaded configuration.

    Args:
        app_config (ApplicationConfig): The configuration to check.
        config (Config): The tool's configuration object.
        base_dir (Optional[Path]): The module directory used to resolve file
            references such as the keystore and proguard files.

    Returns:
        Dict[str, Any]: The aggregated errors and warnings, the release
        readiness, and the individual validator results.
    """
    logger.info(f"Validating configuration for {app_config.application_id}")

    enabled_validators = [
        v(app_config, config, base_dir)
        for v in discover_validators()
        if config.is_validator_enabled(v.name)
    ]
    logger.debug(f"Enabled validators: {', '.join(v.name for v in enabled_validators)}")

    with ThreadPoolExecutor(max_workers=8) as executor:
        validator_results = list(executor.map(lambda v: v.validate(), enabled_validators))

    aggregated_errors = [err for res in validator_results for err in res.get("errors", [])]
    aggregated_warnings = [warn for res in validator_results for warn in res.get("warnings", [])]

    return {
        "application_id": app_config.application_id,
        "version": f"{app_config.version_name} ({app_config.version_code})",
        "readiness": build_readiness(app_config).value,
        "errors": aggregated_errors,
        "warnings": aggregated_warnings,
        "validator_results": validator_results,
    }

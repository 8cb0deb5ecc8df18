"""A collection of build-time validators for application configurations.

This package contains all the individual validator implementations that are
dynamically discovered and run by the core validation engine. Each module in
this package should contain one or more classes that inherit from
`pybuildcfg.core.base_validator.BaseValidator`.
"""
from .compatibility_validator import CompatibilityValidator
from .identifier_validator import IdentifierValidator
from .plugins_validator import PluginsValidator
from .proguard_validator import ProguardValidator
from .sdk_validator import SdkValidator
from .secrets_validator import SecretsValidator
from .signing_validator import SigningValidator

"""
Base validator class that all build-time checks inherit from.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Any, Optional, TYPE_CHECKING

from .model import ApplicationConfig

if TYPE_CHECKING:
    from .config import Config


class BaseValidator(ABC):
    """Abstract base class for all configuration validators.

    All validators must inherit from this class and implement the `_validate`
    method. Loading already guarantees that a configuration is well formed;
    validators check what only matters at build time, such as whether
    referenced files exist or whether the release artifact will be signed.

    Attributes:
        name (str): The display name of the validator.
        category (str): A category for grouping validators (e.g., "Signing").
        description (str): A brief explanation of what the validator checks.
    """

    name: str = "UnnamedValidator"
    category: str = "General"
    description: str = "No description provided"

    def __init__(self, app_config: ApplicationConfig, config: "Config", base_dir: Optional[Path] = None) -> None:
        """Initializes the validator with the configuration under test.

        Args:
            app_config (ApplicationConfig): The loaded build configuration.
            config (Config): The tool's configuration object.
            base_dir (Optional[Path]): The module directory that relative
                file references are resolved against. Defaults to the
                current working directory.
        """
        self.app_config = app_config
        self.config = config
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()
        self.errors: List[str] = []
        self.warnings: List[str] = []
        self.info: Dict[str, Any] = {}

    def validate(self) -> Dict[str, Any]:
        """Performs the validation check and returns the results.

        Any unexpected exception raised by `_validate` is recorded as an
        error of this validator, so that one broken check does not stop the
        others.

        Returns:
            Dict[str, Any]: A dictionary containing the validation results.
        """
        try:
            self._validate()
        except Exception as e:
            self.add_error(f"Validator {self.name} failed: {str(e)}")
        return self.result()

    @abstractmethod
    def _validate(self) -> None:
        """Abstract method for implementing the core validation logic.

        The implementation should use the `add_error`, `add_warning`, and
        `add_info` methods to record its findings.
        """
        raise NotImplementedError("Subclasses must implement _validate()")

    def result(self) -> Dict[str, Any]:
        """Returns the validation results in a standardized dictionary format.

        Returns:
            Dict[str, Any]: A dictionary containing the validator's name,
            category, description, and any findings.
        """
        return {
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "errors": self.errors,
            "warnings": self.warnings,
            "info": self.info,
        }

    def add_error(self, message: str) -> None:
        """Adds an error message; errors make the check fail."""
        self.errors.append(message)

    def add_warning(self, message: str) -> None:
        """Adds a warning message; warnings fail the check in strict mode only."""
        self.warnings.append(message)

    def add_info(self, key: str, value: Any) -> None:
        """Adds informational data to the validation results.

        Args:
            key (str): The key for the informational data.
            value (Any): The value of the informational data.
        """
        self.info[key] = value

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Reads a setting from this validator's `validators.<name>` table.

        Args:
            key (str): The setting name.
            default (Any): The value to return if the setting is not found.

        Returns:
            Any: The setting value or the default.
        """
        return self.config.get(f"validators.{self.name}.{key}", default)

    def check_files(self) -> bool:
        """Whether file-existence checks are enabled."""
        return bool(self.config.get("check_files", True))

    def resolve_path(self, path: str) -> Path:
        """Resolves a descriptor file reference against `base_dir`."""
        candidate = Path(path).expanduser()
        return candidate if candidate.is_absolute() else self.base_dir / candidate

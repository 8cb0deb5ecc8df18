"""Flags a namespace that differs from the application ID.

Both values are legal on their own, but the generated `R` class lives in the
namespace while the store listing uses the application ID. A mismatch is
usually left over from renaming the app, so it is reported instead of being
silently normalized.
"""
from ..core.base_validator import BaseValidator


class IdentifierValidator(BaseValidator):
    """Compares `namespace` with `applicationId`."""

    name = "Identifiers"
    category = "Identity"
    description = "Checks that the namespace and the application ID agree."

    def _validate(self) -> None:
        self.add_info("Application ID", self.app_config.application_id)
        if self.app_config.has_identifier_mismatch:
            self.add_warning(
                f"namespace '{self.app_config.namespace}' differs from applicationId "
                f"'{self.app_config.application_id}'. Confirm this is intended."
            )

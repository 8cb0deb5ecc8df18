"""Checks whether a release artifact can be signed.

This validator reports:
-   Release readiness, i.e. whether the release build will be signed with
    its own credentials or fall back to the debug identity.
-   Which signing fields are missing when it falls back.
-   A keystore file that does not exist.
"""
from ..core.base_validator import BaseValidator
from ..core.model import BuildReadiness
from ..core.signing import build_readiness


class SigningValidator(BaseValidator):
    name = "Signing"
    category = "Signing"
    description = "Checks that the release build has complete signing credentials and an existing keystore."

    def _validate(self) -> None:
        signing = self.app_config.signing
        readiness = build_readiness(self.app_config)
        self.add_info("Readiness", readiness.value)

        if signing is None:
            self.add_warning("No release signing config is declared; release builds are signed with the debug key.")
            return

        self.add_info("Signing Config", signing.name)
        if readiness is BuildReadiness.DEBUG_ONLY:
            self.add_warning(
                f"Signing config '{signing.name}' is missing {', '.join(signing.missing_fields)}; "
                "release builds fall back to the debug key."
            )

        if signing.store_file and self.check_files():
            keystore = self.resolve_path(signing.store_file)
            if not keystore.is_file():
                self.add_error(f"Keystore file not found: {keystore}")
            else:
                self.add_info("Keystore", str(keystore))

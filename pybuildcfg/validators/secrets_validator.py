"""Detects signing passwords written directly in the descriptor.

Credentials belong in an access-controlled store (environment variables or
an untracked `key.properties` file) and should be referenced as `${NAME}`.
"""
from ..core.base_validator import BaseValidator


class SecretsValidator(BaseValidator):
    name = "Secrets"
    category = "Signing"
    description = "Flags signing passwords that are embedded in the descriptor."

    def _validate(self) -> None:
        signing = self.app_config.signing
        if signing is None or not signing.inline_secrets:
            return

        fields = ", ".join(signing.inline_secrets)
        self.add_warning(
            f"Signing config '{signing.name}' embeds {fields} in the descriptor. "
            "Reference them as ${NAME} and supply them from the environment or key.properties."
        )

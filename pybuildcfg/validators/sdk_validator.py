"""Checks SDK levels against each other.

Symbolic references (for example `flutter.targetSdkVersion`) are resolved by
the build tool and are only compared when they are literal API numbers.
"""
from ..core.base_validator import BaseValidator


class SdkValidator(BaseValidator):
    name = "Sdk"
    category = "Compatibility"
    description = "Checks that minSdk does not exceed the target and compile SDK levels."

    def _validate(self) -> None:
        app = self.app_config
        min_sdk = app.min_sdk_version
        self.add_info("minSdk", min_sdk)

        for label, ref in (("targetSdk", app.target_sdk_version), ("compileSdk", app.compile_sdk_version)):
            if ref is None:
                continue
            self.add_info(label, str(ref))
            if not ref.is_symbolic and min_sdk > ref.value:
                self.add_error(f"minSdk {min_sdk} is above {label} {ref.value}.")

        minimum = self.get_setting("minimum_min_sdk")
        if isinstance(minimum, int) and min_sdk < minimum:
            self.add_warning(f"minSdk {min_sdk} is below the configured minimum of {minimum}.")

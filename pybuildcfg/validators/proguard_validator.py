"""Checks the proguard rules of the release build type."""
from ..core.base_validator import BaseValidator


class ProguardValidator(BaseValidator):
    """Verifies that project proguard files exist.

    Default files (`getDefaultProguardFile(...)`) ship with the Android
    Gradle plugin and are not looked up on disk.
    """

    name = "Proguard"
    category = "Minification"
    description = "Checks that referenced proguard files exist and that minification uses them."

    def _validate(self) -> None:
        app = self.app_config
        self.add_info("Minify", "enabled" if app.minify_enabled else "disabled")

        if not app.proguard_files:
            if app.minify_enabled:
                self.add_warning("Minification is enabled but no proguard files are configured.")
            return

        if not app.minify_enabled:
            self.add_warning("Proguard files are configured but minification is disabled, so they are ignored.")

        self.add_info("Proguard Files", ", ".join(str(f) for f in app.proguard_files))
        if not self.check_files():
            return

        for proguard_file in app.proguard_files:
            if proguard_file.default:
                continue
            path = self.resolve_path(proguard_file.path)
            if not path.is_file():
                self.add_error(f"Proguard file not found: {path}")

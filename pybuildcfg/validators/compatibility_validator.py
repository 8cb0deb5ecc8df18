"""Compares the Kotlin JVM target with the Java compile options."""
from ..core.base_validator import BaseValidator


class CompatibilityValidator(BaseValidator):
    name = "Compatibility"
    category = "Compatibility"
    description = "Checks that Kotlin's jvmTarget matches the Java target compatibility."

    def _validate(self) -> None:
        options = self.app_config.compile_options
        jvm_target = self.app_config.jvm_target
        if options is None:
            self.add_info("Java", "Build tool defaults")
            return

        self.add_info("Java", f"source {options.source_compatibility}, target {options.target_compatibility}")
        if jvm_target is not None and jvm_target is not options.target_compatibility:
            self.add_warning(
                f"Kotlin jvmTarget {jvm_target} differs from Java targetCompatibility "
                f"{options.target_compatibility}; the build will fail JVM target validation."
            )

"""Checks the declared build plugins.

The ordering rules themselves live in `pybuildcfg.core.plugins`; this
validator reports a violation as an error and points out an application
module that does not apply the Android application plugin.
"""
from ..core.base_validator import BaseValidator
from ..core.errors import PluginOrderError
from ..core.model import PluginKind
from ..core.plugins import resolve_plugins

ANDROID_APPLICATION_PLUGIN = "com.android.application"


class PluginsValidator(BaseValidator):
    name = "Plugins"
    category = "Build Setup"
    description = "Checks plugin order and that the Android application plugin is applied."

    def _validate(self) -> None:
        if not self.app_config.plugins:
            self.add_warning("No plugins are declared; the descriptor cannot be built as an Android application.")
            return

        try:
            refs = resolve_plugins(self.app_config)
        except PluginOrderError as e:
            self.add_error(str(e))
            return

        self.add_info("Plugins", ", ".join(ref.id for ref in refs))
        if ANDROID_APPLICATION_PLUGIN not in self.app_config.plugins:
            self.add_warning(f"'{ANDROID_APPLICATION_PLUGIN}' is not applied.")
        if not any(ref.kind is PluginKind.PLATFORM for ref in refs):
            self.add_warning("No Android platform plugin is declared.")

"""Classifies and orders the build plugins of an application.

The Flutter Gradle plugin hooks into tasks registered by the Android and
Kotlin plugins, so it has to be applied after all of them.
"""
from typing import Dict, Tuple

from .errors import PluginOrderError
from .model import ApplicationConfig, PluginKind, PluginRef

FRAMEWORK_PLUGINS = ("dev.flutter.flutter-gradle-plugin",)

LANGUAGE_PLUGINS = (
    "kotlin-android",
    "org.jetbrains.kotlin.android",
    "kotlin",
    "org.jetbrains.kotlin.jvm",
)

PLATFORM_PREFIX = "com.android."


def classify_plugin(plugin_id: str) -> PluginKind:
    """Returns the kind of a plugin from its identifier."""
    if plugin_id in FRAMEWORK_PLUGINS:
        return PluginKind.FRAMEWORK
    if plugin_id in LANGUAGE_PLUGINS:
        return PluginKind.LANGUAGE
    if plugin_id.startswith(PLATFORM_PREFIX):
        return PluginKind.PLATFORM
    return PluginKind.OTHER


def resolve_plugins(config: ApplicationConfig) -> Tuple[PluginRef, ...]:
    """Classifies the declared plugins and checks their order.

    Args:
        config (ApplicationConfig): A loaded configuration.

    Returns:
        Tuple[PluginRef, ...]: The plugins in declaration order.

    Raises:
        PluginOrderError: If a plugin is declared twice, or the framework
            plugin precedes a platform or language-toolchain plugin.
    """
    seen: Dict[str, int] = {}
    refs = []
    for index, plugin_id in enumerate(config.plugins):
        if plugin_id in seen:
            raise PluginOrderError(f"Plugin '{plugin_id}' is declared more than once (positions {seen[plugin_id]} and {index})")
        seen[plugin_id] = index
        refs.append(PluginRef(id=plugin_id, kind=classify_plugin(plugin_id)))

    framework_positions = [i for i, ref in enumerate(refs) if ref.kind is PluginKind.FRAMEWORK]
    if framework_positions:
        first_framework = framework_positions[0]
        for ref in refs[first_framework + 1:]:
            if ref.kind in (PluginKind.PLATFORM, PluginKind.LANGUAGE):
                raise PluginOrderError(
                    f"Plugin '{refs[first_framework].id}' must be applied after "
                    f"{ref.kind.value} plugin '{ref.id}'"
                )
    return tuple(refs)

import unittest

from pybuildcfg.core.errors import PluginOrderError
from pybuildcfg.core.loader import load
from pybuildcfg.core.model import PluginKind
from pybuildcfg.core.plugins import classify_plugin, resolve_plugins

from sample_descriptors import sacral


def _with_plugins(plugins):
    descriptor = sacral()
    descriptor["plugins"] = plugins
    return load(descriptor)


class TestResolvePlugins(unittest.TestCase):

    def test_declared_order_is_kept(self):
        refs = resolve_plugins(load(sacral()))

        self.assertEqual([ref.id for ref in refs], list(sacral()["plugins"]))
        self.assertEqual(
            [ref.kind for ref in refs],
            [PluginKind.PLATFORM, PluginKind.LANGUAGE, PluginKind.FRAMEWORK, PluginKind.OTHER],
        )

    def test_framework_before_language_plugin(self):
        config = _with_plugins(["com.android.application", "dev.flutter.flutter-gradle-plugin", "kotlin-android"])

        with self.assertRaises(PluginOrderError) as ctx:
            resolve_plugins(config)
        self.assertIn("kotlin-android", str(ctx.exception))

    def test_framework_before_platform_plugin(self):
        config = _with_plugins(["dev.flutter.flutter-gradle-plugin", "com.android.application"])

        with self.assertRaises(PluginOrderError):
            resolve_plugins(config)

    def test_other_plugins_may_follow_framework(self):
        config = _with_plugins([
            "com.android.application",
            "org.jetbrains.kotlin.android",
            "dev.flutter.flutter-gradle-plugin",
            "com.google.gms.google-services",
            "com.google.firebase.crashlytics",
        ])
        self.assertEqual(len(resolve_plugins(config)), 5)

    def test_duplicate_plugin(self):
        config = _with_plugins(["com.android.application", "kotlin-android", "kotlin-android"])

        with self.assertRaises(PluginOrderError):
            resolve_plugins(config)

    def test_no_plugins(self):
        self.assertEqual(resolve_plugins(_with_plugins([])), ())

    def test_classify(self):
        self.assertIs(classify_plugin("com.android.library"), PluginKind.PLATFORM)
        self.assertIs(classify_plugin("org.jetbrains.kotlin.android"), PluginKind.LANGUAGE)
        self.assertIs(classify_plugin("dev.flutter.flutter-gradle-plugin"), PluginKind.FRAMEWORK)
        self.assertIs(classify_plugin("com.google.gms.google-services"), PluginKind.OTHER)


if __name__ == '__main__':
    unittest.main()

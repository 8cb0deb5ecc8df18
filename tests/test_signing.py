import unittest
import warnings

from pybuildcfg.core.errors import ConfigError, DegradedSigningWarning
from pybuildcfg.core.loader import load
from pybuildcfg.core.model import FALLBACK, BuildReadiness, BuildType, Fallback
from pybuildcfg.core.signing import build_readiness, select_signing_config

from sample_descriptors import SACRAL_SECRETS, daily_quotes, sacral


class TestSelectSigningConfig(unittest.TestCase):

    def test_complete_release_signing_is_returned(self):
        """A fully populated block is returned as-is, without a warning."""
        config = load(sacral(), SACRAL_SECRETS)

        with warnings.catch_warnings():
            warnings.simplefilter("error")
            selected = select_signing_config(config, BuildType.RELEASE)

        self.assertIs(selected, config.signing)
        self.assertEqual(selected.store_file, "release-key.jks")

    def test_release_string_build_type(self):
        config = load(sacral(), SACRAL_SECRETS)
        self.assertIs(select_signing_config(config, "release"), config.signing)

    def test_empty_signing_block_falls_back(self):
        config = load(daily_quotes())

        with self.assertWarns(DegradedSigningWarning) as ctx:
            selected = select_signing_config(config, BuildType.RELEASE)

        self.assertIs(selected, FALLBACK)
        self.assertIn("com.yourcompany.dailyquotes", str(ctx.warning))
        self.assertIn("storeFile", str(ctx.warning))

    def test_partial_signing_block_falls_back(self):
        config = load(sacral(), {"STORE_PASSWORD": "s3cret"})

        with self.assertWarns(DegradedSigningWarning) as ctx:
            selected = select_signing_config(config, BuildType.RELEASE)

        self.assertIs(selected, FALLBACK)
        self.assertIn("keyPassword", str(ctx.warning))

    def test_missing_signing_block_falls_back(self):
        descriptor = sacral()
        del descriptor["android"]["signingConfigs"]
        del descriptor["android"]["buildTypes"]["release"]["signingConfig"]
        config = load(descriptor)

        with self.assertWarns(DegradedSigningWarning):
            self.assertIs(select_signing_config(config, BuildType.RELEASE), FALLBACK)

    def test_every_fallback_is_reported(self):
        config = load(daily_quotes())

        with warnings.catch_warnings(record=True) as caught, self.assertLogs("pybuildcfg.core.signing", "WARNING") as logs:
            warnings.simplefilter("always")
            for _ in range(2):
                select_signing_config(config, BuildType.RELEASE)

        self.assertEqual([w.category for w in caught], [DegradedSigningWarning, DegradedSigningWarning])
        self.assertEqual(len(logs.records), 2)

    def test_debug_always_falls_back_silently(self):
        for config in (load(sacral(), SACRAL_SECRETS), load(daily_quotes())):
            with warnings.catch_warnings():
                warnings.simplefilter("error")
                self.assertIs(select_signing_config(config, BuildType.DEBUG), FALLBACK)

    def test_unknown_build_type(self):
        config = load(sacral(), SACRAL_SECRETS)
        with self.assertRaises(ConfigError):
            select_signing_config(config, "staging")

    def test_fallback_is_a_singleton(self):
        self.assertIs(Fallback(), FALLBACK)
        self.assertEqual(repr(FALLBACK), "FALLBACK")


class TestBuildReadiness(unittest.TestCase):

    def test_readiness(self):
        self.assertIs(build_readiness(load(sacral(), SACRAL_SECRETS)), BuildReadiness.RELEASE)
        self.assertIs(build_readiness(load(sacral())), BuildReadiness.DEBUG_ONLY)
        self.assertIs(build_readiness(load(daily_quotes())), BuildReadiness.DEBUG_ONLY)


if __name__ == '__main__':
    unittest.main()

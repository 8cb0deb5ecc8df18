import unittest

from pybuildcfg.core.errors import ConfigError
from pybuildcfg.core.loader import load
from pybuildcfg.utils.gradle import parse_gradle_kts, parse_value

SIGNED_SCRIPT = '''
plugins {
    id("com.android.application")
    id("kotlin-android")
    // Applied after the Android and Kotlin plugins.
    id("dev.flutter.flutter-gradle-plugin")
    id("com.google.gms.google-services")
}

android {
    namespace = "com.sacral.app"
    compileSdk = flutter.compileSdkVersion
    ndkVersion = "27.0.12077973"

    compileOptions {
        sourceCompatibility = JavaVersion.VERSION_11
        targetCompatibility = JavaVersion.VERSION_11
    }

    kotlinOptions {
        jvmTarget = JavaVersion.VERSION_11.toString()
    }

    dependencies {
        implementation("com.google.android.gms:play-services-auth:21.2.0")
        implementation("com.google.android.gms:play-services-base:18.5.0")
    }

    defaultConfig {
        applicationId = "com.sacral.app"
        minSdk = 21 // lowest supported API level
        targetSdk = flutter.targetSdkVersion
        versionCode = 1
        versionName = "1.0.0"
    }

    signingConfigs {
        create("release") {
            storeFile = file("release-key.jks")
            storePassword = "1488228"
            keyAlias = "release"
            keyPassword = "1488228"
        }
    }

    buildTypes {
        release {
            signingConfig = signingConfigs.getByName("release")
            /* shrink the APK */
            isMinifyEnabled = true
            proguardFiles(getDefaultProguardFile("proguard-android-optimize.txt"), "proguard-rules.pro")
        }
    }
}

flutter {
    source = "../.."
}
'''

TEMPLATE_SCRIPT = '''
import java.util.Properties
import java.io.FileInputStream

plugins {
    id("com.android.application")
    id("kotlin-android")
    id("dev.flutter.flutter-gradle-plugin")
}

val keystoreProperties = Properties()
val keystorePropertiesFile = rootProject.file("key.properties")
if (keystorePropertiesFile.exists()) {
    keystoreProperties.load(FileInputStream(keystorePropertiesFile))
}

android {
    namespace = "com.example.daily_quotes"
    compileSdk = 34

    defaultConfig {
        applicationId = "com.yourcompany.dailyquotes"
        minSdk = 21
        targetSdk = 34
        versionCode = 3
        versionName = "1.2.0"
    }

    signingConfigs {
        create("release") {
            keyAlias = keystoreProperties["keyAlias"] as String
            keyPassword = keystoreProperties["keyPassword"] as String
            storeFile = keystoreProperties["storeFile"]?.let { file(it) }
            storePassword = System.getenv("STORE_PASSWORD")
        }
    }

    buildTypes {
        release {
            // signingConfig = signingConfigs.getByName("release")
            signingConfig = signingConfigs.getByName("debug")
        }
    }
}
'''


class TestParseGradleKts(unittest.TestCase):

    def test_signed_script(self):
        descriptor = parse_gradle_kts(SIGNED_SCRIPT)

        self.assertEqual(descriptor["plugins"], [
            "com.android.application",
            "kotlin-android",
            "dev.flutter.flutter-gradle-plugin",
            "com.google.gms.google-services",
        ])
        android = descriptor["android"]
        self.assertEqual(android["namespace"], "com.sacral.app")
        self.assertEqual(android["compileSdk"], "flutter.compileSdkVersion")
        self.assertEqual(android["compileOptions"]["sourceCompatibility"], "VERSION_11")
        self.assertEqual(android["kotlinOptions"]["jvmTarget"], "VERSION_11")
        self.assertEqual(android["defaultConfig"]["minSdk"], 21)
        self.assertEqual(android["signingConfigs"]["release"]["storeFile"], "release-key.jks")
        self.assertEqual(android["buildTypes"]["release"], {
            "signingConfig": "release",
            "isMinifyEnabled": True,
            "proguardFiles": [{"default": "proguard-android-optimize.txt"}, "proguard-rules.pro"],
        })
        self.assertEqual(len(android["dependencies"]), 2)
        self.assertEqual(descriptor["flutter"], {"source": "../.."})

    def test_signed_script_loads(self):
        config = load(parse_gradle_kts(SIGNED_SCRIPT))

        self.assertEqual(config.application_id, "com.sacral.app")
        self.assertTrue(config.signing.is_complete)
        self.assertEqual(config.signing.inline_secrets, ("storePassword", "keyPassword"))
        self.assertTrue(config.minify_enabled)
        self.assertEqual(config.dependencies[1].notation, "com.google.android.gms:play-services-base:18.5.0")

    def test_template_script_secret_references(self):
        descriptor = parse_gradle_kts(TEMPLATE_SCRIPT)
        release = descriptor["android"]["signingConfigs"]["release"]

        self.assertEqual(release, {
            "keyAlias": "${keyAlias}",
            "keyPassword": "${keyPassword}",
            "storeFile": "${storeFile}",
            "storePassword": "${STORE_PASSWORD}",
        })
        self.assertEqual(descriptor["android"]["buildTypes"]["release"], {"signingConfig": "debug"})

    def test_template_script_loads_with_debug_signing(self):
        config = load(parse_gradle_kts(TEMPLATE_SCRIPT))

        self.assertIsNone(config.signing)
        self.assertEqual(config.target_sdk_version.value, 34)
        self.assertEqual(config.version_code, 3)
        self.assertTrue(config.has_identifier_mismatch)

    def test_unbalanced_braces(self):
        with self.assertRaises(ConfigError):
            parse_gradle_kts("android {\n namespace = \"com.example.app\"\n")
        with self.assertRaises(ConfigError):
            parse_gradle_kts("android { }\n}")

    def test_strings_keep_comment_markers(self):
        descriptor = parse_gradle_kts('flutter {\n    source = "https://example.com//x"\n}\n')
        self.assertEqual(descriptor["flutter"]["source"], "https://example.com//x")


class TestParseValue(unittest.TestCase):

    def test_literals(self):
        self.assertEqual(parse_value('"1.0.0"'), "1.0.0")
        self.assertEqual(parse_value("21"), 21)
        self.assertIs(parse_value("false"), False)

    def test_references(self):
        self.assertEqual(parse_value('rootProject.file("keys/upload.jks")'), "keys/upload.jks")
        self.assertEqual(parse_value('file(keystoreProperties["storeFile"] as String)'), "${storeFile}")
        self.assertEqual(parse_value('props.getProperty("keyAlias")'), "${keyAlias}")
        self.assertEqual(parse_value('System.getenv("KEY_PASSWORD") ?: ""'), "${KEY_PASSWORD}")
        self.assertEqual(parse_value('signingConfigs["upload"]'), "upload")
        self.assertEqual(parse_value("JavaVersion.VERSION_1_8"), "VERSION_1_8")

    def test_unknown_expression_is_kept(self):
        self.assertEqual(parse_value("flutter.versionCode"), "flutter.versionCode")


if __name__ == '__main__':
    unittest.main()

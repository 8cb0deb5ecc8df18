"""Descriptor trees shared by the test modules."""
import copy

SACRAL = {
    "plugins": [
        "com.android.application",
        "kotlin-android",
        "dev.flutter.flutter-gradle-plugin",
        "com.google.gms.google-services",
    ],
    "android": {
        "namespace": "com.sacral.app",
        "compileSdk": "flutter.compileSdkVersion",
        "ndkVersion": "27.0.12077973",
        "compileOptions": {
            "sourceCompatibility": "VERSION_11",
            "targetCompatibility": "VERSION_11",
        },
        "kotlinOptions": {"jvmTarget": "VERSION_11"},
        "dependencies": [
            {"configuration": "implementation", "notation": "com.google.android.gms:play-services-auth:21.2.0"},
        ],
        "defaultConfig": {
            "applicationId": "com.sacral.app",
            "minSdk": 21,
            "targetSdk": "flutter.targetSdkVersion",
            "versionCode": 1,
            "versionName": "1.0.0",
        },
        "signingConfigs": {
            "release": {
                "storeFile": "release-key.jks",
                "storePassword": "${STORE_PASSWORD}",
                "keyAlias": "release",
                "keyPassword": "${KEY_PASSWORD}",
            },
        },
        "buildTypes": {
            "release": {
                "signingConfig": "release",
                "isMinifyEnabled": True,
                "proguardFiles": [{"default": "proguard-android-optimize.txt"}, "proguard-rules.pro"],
            },
        },
    },
    "flutter": {"source": "../.."},
}

SACRAL_SECRETS = {"STORE_PASSWORD": "s3cret", "KEY_PASSWORD": "k3y"}

DAILY_QUOTES = {
    "plugins": ["com.android.application", "kotlin-android", "dev.flutter.flutter-gradle-plugin"],
    "android": {
        "namespace": "com.example.daily_quotes",
        "defaultConfig": {
            "applicationId": "com.yourcompany.dailyquotes",
            "minSdk": 21,
            "versionCode": 1,
            "versionName": "1.0.0",
        },
        "signingConfigs": {"release": {}},
        "buildTypes": {"release": {"signingConfig": "release"}},
    },
}


def sacral():
    return copy.deepcopy(SACRAL)


def daily_quotes():
    return copy.deepcopy(DAILY_QUOTES)

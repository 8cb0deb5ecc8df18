"""Loads a build descriptor into an `ApplicationConfig`.

A descriptor is a plain key/value tree, shaped like the ``android {}`` block
of a Gradle build script:

    plugins = ["com.android.application", "kotlin-android", ...]
    android.namespace, android.compileSdk, android.ndkVersion
    android.compileOptions.{sourceCompatibility,targetCompatibility}
    android.kotlinOptions.jvmTarget
    android.defaultConfig.{applicationId,minSdk,targetSdk,versionCode,versionName}
    android.signingConfigs.<name>.{storeFile,storePassword,keyAlias,keyPassword}
    android.buildTypes.release.{signingConfig,isMinifyEnabled,proguardFiles}

Loading is a pure function of the descriptor and the secrets mapping: it does
no file or environment access, and it either returns a complete configuration
or raises a `ConfigError` subclass.
"""
import logging
import re
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from .errors import ConfigError, InvalidIdentifier, InvalidVersion, MissingField
from .model import (
    ApplicationConfig,
    CompileOptions,
    Dependency,
    JavaVersion,
    ProguardFile,
    SdkRef,
    SigningConfig,
)

logger = logging.getLogger(__name__)

IDENTIFIER_RE = re.compile(r"[a-z][a-z0-9_]*(\.[a-z][a-z0-9_]*)+")

# A string value of the form "${NAME}" is looked up in the secrets mapping.
SECRET_REF_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_.\-]*)\}")

PASSWORD_FIELDS = ("storePassword", "keyPassword")


def load(descriptor: Mapping[str, Any], secrets: Optional[Mapping[str, str]] = None) -> ApplicationConfig:
    """Parses and validates a descriptor.

    Args:
        descriptor (Mapping[str, Any]): The descriptor tree.
        secrets (Optional[Mapping[str, str]]): Values for ``${NAME}``
            references in the signing block. References with no entry
            resolve to None, which leaves the signing block incomplete.

    Returns:
        ApplicationConfig: The fully populated configuration.

    Raises:
        MissingField: A required field is absent.
        InvalidIdentifier: ``namespace`` or ``applicationId`` is malformed.
        InvalidVersion: An SDK, version or language level is out of range.
        ConfigError: Any other structural problem with the descriptor.
    """
    if not isinstance(descriptor, Mapping):
        raise ConfigError(f"Descriptor must be a mapping, got {type(descriptor).__name__}")
    secrets = secrets or {}

    android = _section(descriptor, "android", "android")
    default_config = _section(android, "defaultConfig", "android.defaultConfig")
    build_types = _section(android, "buildTypes", "android.buildTypes")
    release_type = _section(build_types, "release", "android.buildTypes.release")

    namespace = _identifier(android.get("namespace"), "android.namespace")
    application_id = _identifier(default_config.get("applicationId"), "android.defaultConfig.applicationId")
    if namespace != application_id:
        logger.warning(f"namespace '{namespace}' differs from applicationId '{application_id}'")

    min_sdk_key = "minSdkVersion" if "minSdk" not in default_config and "minSdkVersion" in default_config else "minSdk"
    config = ApplicationConfig(
        namespace=namespace,
        application_id=application_id,
        min_sdk_version=_positive_int(default_config.get(min_sdk_key), f"android.defaultConfig.{min_sdk_key}"),
        version_code=_positive_int(default_config.get("versionCode"), "android.defaultConfig.versionCode"),
        version_name=_version_name(default_config.get("versionName")),
        target_sdk_version=_target_sdk(android, default_config),
        compile_sdk_version=_sdk_ref(android.get("compileSdk"), "android.compileSdk"),
        ndk_version=_optional_str(android.get("ndkVersion"), "android.ndkVersion"),
        compile_options=_compile_options(android),
        jvm_target=_jvm_target(android),
        signing=_release_signing(android, release_type, secrets),
        minify_enabled=_minify_enabled(release_type),
        proguard_files=_proguard_files(release_type.get("proguardFiles")),
        plugins=_plugins(descriptor.get("plugins")),
        dependencies=_dependencies(descriptor, android),
        flutter_source=_optional_str(_section(descriptor, "flutter", "flutter").get("source"), "flutter.source"),
    )
    logger.debug(f"Loaded configuration for {config.application_id} ({config.version_name})")
    return config


def _section(parent: Mapping[str, Any], key: str, path: str) -> Mapping[str, Any]:
    """Returns a nested mapping, or an empty one when the key is absent."""
    value = parent.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigError(f"{path} must be a mapping, got {type(value).__name__}", field=path)
    return value


def _identifier(value: Any, path: str) -> str:
    if value is None:
        raise MissingField(path)
    if not isinstance(value, str) or not IDENTIFIER_RE.fullmatch(value):
        raise InvalidIdentifier(path, value)
    return value


def _positive_int(value: Any, path: str) -> int:
    if value is None:
        raise MissingField(path)
    # bool is an int subclass; `true` is not a version.
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidVersion(path, value, "must be an integer")
    if value < 1:
        raise InvalidVersion(path, value, "must be a positive integer")
    return value


def _version_name(value: Any) -> str:
    path = "android.defaultConfig.versionName"
    if value is None:
        raise MissingField(path)
    if not isinstance(value, str):
        raise InvalidVersion(path, value, "must be a string")
    if not value.strip():
        raise InvalidVersion(path, value, "must not be empty")
    return value


def _optional_str(value: Any, path: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"{path} must be a string, got {type(value).__name__}", field=path)
    return value


def _sdk_ref(value: Any, path: str) -> Optional[SdkRef]:
    if value is None:
        return None
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value)
    if isinstance(value, str) and value.strip():
        return SdkRef(value.strip())
    return SdkRef(_positive_int(value, path))


def _target_sdk(android: Mapping[str, Any], default_config: Mapping[str, Any]) -> Optional[SdkRef]:
    if "targetSdk" in default_config:
        return _sdk_ref(default_config["targetSdk"], "android.defaultConfig.targetSdk")
    return _sdk_ref(android.get("targetSdk"), "android.targetSdk")


def _java_version(value: Any, path: str) -> JavaVersion:
    if value is None:
        raise MissingField(path)
    try:
        return JavaVersion.parse(value)
    except ValueError:
        raise InvalidVersion(path, value, "unknown Java language level") from None


def _compile_options(android: Mapping[str, Any]) -> Optional[CompileOptions]:
    block = _section(android, "compileOptions", "android.compileOptions")
    if not block:
        return None
    source = _java_version(block.get("sourceCompatibility"), "android.compileOptions.sourceCompatibility")
    target = _java_version(block.get("targetCompatibility"), "android.compileOptions.targetCompatibility")
    if source.value > target.value:
        raise InvalidVersion(
            "android.compileOptions.sourceCompatibility",
            str(source),
            f"source level is above target level {target}",
        )
    return CompileOptions(source_compatibility=source, target_compatibility=target)


def _jvm_target(android: Mapping[str, Any]) -> Optional[JavaVersion]:
    value = _section(android, "kotlinOptions", "android.kotlinOptions").get("jvmTarget")
    if value is None:
        return None
    return _java_version(value, "android.kotlinOptions.jvmTarget")


def _release_signing(
    android: Mapping[str, Any], release_type: Mapping[str, Any], secrets: Mapping[str, str]
) -> Optional[SigningConfig]:
    """Builds the signing block referenced by the release build type.

    With no explicit ``signingConfig`` reference, a block named ``release``
    is used when one is declared. A reference to ``debug`` means the release
    build is deliberately signed with the debug identity.
    """
    signing_configs = _section(android, "signingConfigs", "android.signingConfigs")
    ref = release_type.get("signingConfig")
    if ref is None:
        if "release" not in signing_configs:
            return None
        ref = "release"
    if not isinstance(ref, str):
        raise ConfigError("android.buildTypes.release.signingConfig must be a name", field="android.buildTypes.release.signingConfig")
    if ref == "debug" and "debug" not in signing_configs:
        return None
    if ref not in signing_configs:
        raise MissingField(f"android.signingConfigs.{ref}")

    path = f"android.signingConfigs.{ref}"
    block = _section(signing_configs, ref, path)
    values: Dict[str, Optional[str]] = {}
    inline = []
    for key in ("storeFile", "storePassword", "keyAlias", "keyPassword"):
        value, is_literal = _credential(block.get(key), f"{path}.{key}", secrets)
        values[key] = value
        if is_literal and key in PASSWORD_FIELDS:
            inline.append(key)

    return SigningConfig(
        name=ref,
        store_file=values["storeFile"],
        store_password=values["storePassword"],
        key_alias=values["keyAlias"],
        key_password=values["keyPassword"],
        inline_secrets=tuple(inline),
    )


def _credential(value: Any, path: str, secrets: Mapping[str, str]) -> Tuple[Optional[str], bool]:
    """Resolves one signing field.

    Returns:
        Tuple[Optional[str], bool]: The resolved value and whether it was
        written literally in the descriptor.
    """
    if value is None or value == "":
        return None, False
    if not isinstance(value, str):
        raise ConfigError(f"{path} must be a string, got {type(value).__name__}", field=path)
    match = SECRET_REF_RE.fullmatch(value)
    if not match:
        return value, True
    resolved = secrets.get(match.group(1))
    if not resolved:
        logger.debug(f"No secret available for {path} (reference {match.group(1)})")
        return None, False
    return resolved, False


def _minify_enabled(release_type: Mapping[str, Any]) -> bool:
    value = release_type.get("isMinifyEnabled", release_type.get("minifyEnabled", False))
    if not isinstance(value, bool):
        raise ConfigError(
            "android.buildTypes.release.isMinifyEnabled must be a boolean",
            field="android.buildTypes.release.isMinifyEnabled",
        )
    return value


def _proguard_files(value: Any) -> Tuple[ProguardFile, ...]:
    path = "android.buildTypes.release.proguardFiles"
    if value is None:
        return ()
    if isinstance(value, (str, Mapping)) or not isinstance(value, Iterable):
        raise ConfigError(f"{path} must be a list", field=path)

    files = []
    for entry in value:
        if isinstance(entry, str) and entry:
            files.append(ProguardFile(entry))
        elif isinstance(entry, Mapping) and isinstance(entry.get("default"), str):
            files.append(ProguardFile(entry["default"], default=True))
        else:
            raise ConfigError(f"Unsupported entry in {path}: {entry!r}", field=path)
    return tuple(files)


def _plugins(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, (str, Mapping)) or not isinstance(value, Iterable):
        raise ConfigError("plugins must be a list", field="plugins")

    plugins = []
    for entry in value:
        plugin_id = entry.get("id") if isinstance(entry, Mapping) else entry
        if not isinstance(plugin_id, str) or not plugin_id.strip():
            raise ConfigError(f"Unsupported plugin entry: {entry!r}", field="plugins")
        plugins.append(plugin_id.strip())
    return tuple(plugins)


def _dependencies(descriptor: Mapping[str, Any], android: Mapping[str, Any]) -> Tuple[Dependency, ...]:
    """Collects dependencies declared at the top level or inside ``android``."""
    deps = []
    for path, value in (("dependencies", descriptor.get("dependencies")), ("android.dependencies", android.get("dependencies"))):
        if value is None:
            continue
        if isinstance(value, (str, Mapping)) or not isinstance(value, Iterable):
            raise ConfigError(f"{path} must be a list", field=path)
        for entry in value:
            if isinstance(entry, str):
                deps.append(Dependency("implementation", entry))
            elif isinstance(entry, Mapping) and isinstance(entry.get("notation"), str):
                deps.append(Dependency(str(entry.get("configuration", "implementation")), entry["notation"]))
            else:
                raise ConfigError(f"Unsupported entry in {path}: {entry!r}", field=path)
    return tuple(deps)

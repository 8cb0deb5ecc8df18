"""Typed, immutable view of an application's build configuration.

Instances of these classes are produced once by `pybuildcfg.core.loader.load`
and then passed explicitly to whatever consumes them. None of them is ever
mutated after construction.
"""
import enum
import re
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

_JAVA_VERSION_RE = re.compile(r"^(?:JavaVersion\.)?(?:VERSION_)?(1[._])?(\d+)(?:\.toString\(\))?$")


class JavaVersion(enum.Enum):
    """Java language levels accepted for source/target compatibility."""

    VERSION_1_6 = 6
    VERSION_1_7 = 7
    VERSION_1_8 = 8
    VERSION_1_9 = 9
    VERSION_1_10 = 10
    VERSION_11 = 11
    VERSION_12 = 12
    VERSION_13 = 13
    VERSION_14 = 14
    VERSION_15 = 15
    VERSION_16 = 16
    VERSION_17 = 17
    VERSION_18 = 18
    VERSION_19 = 19
    VERSION_20 = 20
    VERSION_21 = 21

    @classmethod
    def parse(cls, raw: Union["JavaVersion", int, str]) -> "JavaVersion":
        """Converts a descriptor value into a `JavaVersion`.

        Accepts the enum itself, a feature number (``11``), the Gradle
        spelling (``"VERSION_11"``, ``"JavaVersion.VERSION_1_8"``) and the
        dotted form (``"1.8"``).

        Raises:
            ValueError: If the value does not name a known language level.
        """
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, bool):
            raise ValueError(f"Not a Java version: {raw!r}")
        if isinstance(raw, int):
            return cls(raw)
        match = _JAVA_VERSION_RE.match(str(raw).strip())
        if not match:
            raise ValueError(f"Not a Java version: {raw!r}")
        return cls(int(match.group(2)))

    def __str__(self) -> str:
        return str(self.value) if self.value > 8 else f"1.{self.value}"


@dataclass(frozen=True)
class CompileOptions:
    """Java source and target compatibility levels."""

    source_compatibility: JavaVersion
    target_compatibility: JavaVersion


@dataclass(frozen=True)
class SdkRef:
    """An SDK level, either a literal API number or a symbolic reference.

    Symbolic references such as ``flutter.targetSdkVersion`` are resolved by
    the build tool, not here.
    """

    value: Union[int, str]

    @property
    def is_symbolic(self) -> bool:
        return not isinstance(self.value, int)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ProguardFile:
    """A proguard rules file reference.

    Attributes:
        path (str): The file name or path, relative to the module directory.
        default (bool): True for files shipped with the Android Gradle plugin
            (``getDefaultProguardFile(...)``), which do not live in the
            project tree.
    """

    path: str
    default: bool = False

    def __str__(self) -> str:
        return f"getDefaultProguardFile({self.path})" if self.default else self.path


@dataclass(frozen=True)
class Dependency:
    configuration: str
    notation: str


@dataclass(frozen=True)
class SigningConfig:
    """Credentials used to sign a release artifact.

    Passwords are excluded from `repr` so that a config can be logged or
    printed without leaking them.

    Attributes:
        name (str): The name of the signing block (usually ``release``).
        store_file (Optional[str]): The keystore path.
        store_password (Optional[str]): The keystore password.
        key_alias (Optional[str]): The alias of the signing key.
        key_password (Optional[str]): The key password.
        inline_secrets (Tuple[str, ...]): Password fields that were written
            literally in the descriptor instead of being referenced.
    """

    name: str = "release"
    store_file: Optional[str] = None
    store_password: Optional[str] = field(default=None, repr=False)
    key_alias: Optional[str] = None
    key_password: Optional[str] = field(default=None, repr=False)
    inline_secrets: Tuple[str, ...] = ()

    @property
    def missing_fields(self) -> Tuple[str, ...]:
        """Names of the credential fields that are absent or empty."""
        values = {
            "storeFile": self.store_file,
            "storePassword": self.store_password,
            "keyAlias": self.key_alias,
            "keyPassword": self.key_password,
        }
        return tuple(name for name, value in values.items() if not value)

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields


class Fallback:
    """Sentinel for "sign with the debug identity"."""

    _instance: Optional["Fallback"] = None

    def __new__(cls) -> "Fallback":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "FALLBACK"


FALLBACK = Fallback()


class BuildType(str, enum.Enum):
    RELEASE = "release"
    DEBUG = "debug"


class BuildReadiness(str, enum.Enum):
    """Which artifacts a configuration can produce."""

    RELEASE = "release"
    DEBUG_ONLY = "debug-only"


class PluginKind(str, enum.Enum):
    PLATFORM = "platform"
    LANGUAGE = "language"
    FRAMEWORK = "framework"
    OTHER = "other"


@dataclass(frozen=True)
class PluginRef:
    id: str
    kind: PluginKind


@dataclass(frozen=True)
class ApplicationConfig:
    """The validated build configuration of one application module.

    See `pybuildcfg.core.loader.load` for how each attribute is read from a
    descriptor and which invariants are enforced.
    """

    namespace: str
    application_id: str
    min_sdk_version: int
    version_code: int
    version_name: str
    target_sdk_version: Optional[SdkRef] = None
    compile_sdk_version: Optional[SdkRef] = None
    ndk_version: Optional[str] = None
    compile_options: Optional[CompileOptions] = None
    jvm_target: Optional[JavaVersion] = None
    signing: Optional[SigningConfig] = None
    minify_enabled: bool = False
    proguard_files: Tuple[ProguardFile, ...] = ()
    plugins: Tuple[str, ...] = ()
    dependencies: Tuple[Dependency, ...] = ()
    flutter_source: Optional[str] = None

    @property
    def has_identifier_mismatch(self) -> bool:
        """True when `namespace` and `application_id` differ.

        A mismatch is legal for the build tool but usually unintended, so it
        is reported rather than corrected.
        """
        return self.namespace != self.application_id

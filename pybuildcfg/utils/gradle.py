"""Reads a descriptor out of an Android `build.gradle.kts` script.

This is a best-effort parser: it never executes the script, it only
recognises the declarative shapes an app module normally uses:

    plugins { id("...") }
    android {
        namespace = "..."
        compileOptions { sourceCompatibility = JavaVersion.VERSION_11 }
        defaultConfig { applicationId = "..." ... }
        signingConfigs { create("release") { storeFile = file("...") ... } }
        buildTypes { release { signingConfig = signingConfigs.getByName("release") ... } }
    }
    dependencies { implementation("...") }
    flutter { source = "../.." }

Expressions it does not understand are kept as their source text, which the
loader treats as symbolic references where that is allowed (SDK levels) and
rejects elsewhere.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..core.errors import ConfigError

_NAMED_BLOCK_RE = re.compile(r'^(?:create|getByName|register|maybeCreate|named)\("([^"]+)"\)$')
_ASSIGNMENT_RE = re.compile(r"^([A-Za-z_]\w*)\s*=\s*(.+)$")
_CALL_RE = re.compile(r"^([A-Za-z_]\w*)\s*\((.*)\)$", re.DOTALL)
_PLUGIN_ID_RE = re.compile(r'^id\s*\(\s*"([^"]+)"\s*\)')
_KOTLIN_PLUGIN_RE = re.compile(r'^kotlin\s*\(\s*"([^"]+)"\s*\)')

_STRING_RE = re.compile(r'^"((?:[^"\\]|\\.)*)"$')
_INT_RE = re.compile(r"^-?\d+$")
_FILE_RE = re.compile(r"^(?:\w+\.)*file\s*\((.+)\)$")
_GETENV_RE = re.compile(r'^System\.getenv\s*\(\s*"([^"]+)"\s*\)')
_SIGNING_REF_RE = re.compile(r'^signingConfigs(?:\.getByName\("([^"]+)"\)|\["([^"]+)"\]|\.(\w+))$')
_PROPERTY_RE = re.compile(r'^\w+(?:\["([^"]+)"\]|\.getProperty\("([^"]+)"\))')
_JAVA_VERSION_RE = re.compile(r"^JavaVersion\.(VERSION_\w+?)(?:\.toString\(\))?$")
_DEFAULT_PROGUARD_RE = re.compile(r'^getDefaultProguardFile\s*\(\s*"([^"]+)"\s*\)$')

DEPENDENCY_CONFIGURATIONS = (
    "implementation",
    "api",
    "compileOnly",
    "runtimeOnly",
    "testImplementation",
    "androidTestImplementation",
    "debugImplementation",
    "releaseImplementation",
    "coreLibraryDesugaring",
)


@dataclass
class _Block:
    statements: List[str] = field(default_factory=list)
    blocks: List[Tuple[str, "_Block"]] = field(default_factory=list)

    def child(self, name: str) -> Optional["_Block"]:
        for block_name, block in self.blocks:
            if block_name == name:
                return block
        return None


def parse_gradle_kts(text: str) -> Dict[str, Any]:
    """Converts the text of a `build.gradle.kts` file into a descriptor.

    Args:
        text (str): The script source.

    Returns:
        Dict[str, Any]: A descriptor suitable for `pybuildcfg.core.loader.load`.

    Raises:
        ConfigError: If the braces of the script are unbalanced.
    """
    root = _parse_tree(text)
    descriptor: Dict[str, Any] = {}

    plugins = root.child("plugins")
    if plugins is not None:
        descriptor["plugins"] = _plugin_ids(plugins)

    android = root.child("android")
    if android is not None:
        descriptor["android"] = _android_section(android)

    dependencies = root.child("dependencies")
    if dependencies is not None:
        descriptor["dependencies"] = _dependencies(dependencies)

    flutter = root.child("flutter")
    if flutter is not None:
        descriptor["flutter"] = _assignments(flutter)

    return descriptor


def _tokenize(text: str) -> Iterator[Tuple[str, str]]:
    """Splits a script into ("open", header), ("close", "") and ("stmt", text) tokens.

    Statements end at a newline or semicolon outside parentheses; comments
    are dropped and string literals are kept intact.
    """
    buf: List[str] = []
    depth = 0
    i = 0
    length = len(text)

    def flush() -> str:
        stmt = "".join(buf).strip()
        buf.clear()
        return stmt

    while i < length:
        ch = text[i]
        nxt = text[i + 1] if i + 1 < length else ""
        if ch == '"':
            end = i + 1
            while end < length and text[end] != '"':
                end += 2 if text[end] == "\\" else 1
            buf.append(text[i:end + 1])
            i = end + 1
            continue
        if ch == "/" and nxt == "/":
            end = text.find("\n", i)
            i = length if end == -1 else end
            continue
        if ch == "/" and nxt == "*":
            end = text.find("*/", i + 2)
            i = length if end == -1 else end + 2
            continue

        if ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(0, depth - 1)

        if depth == 0 and ch == "{":
            yield "open", flush()
        elif depth == 0 and ch == "}":
            stmt = flush()
            if stmt:
                yield "stmt", stmt
            yield "close", ""
        elif depth == 0 and ch in "\n;":
            stmt = flush()
            if stmt:
                yield "stmt", stmt
        else:
            buf.append(ch)
        i += 1

    stmt = flush()
    if stmt:
        yield "stmt", stmt


def _parse_tree(text: str) -> _Block:
    root = _Block()
    stack = [root]
    for kind, value in _tokenize(text):
        if kind == "open":
            # `storeFile = props["x"]?.let { file(it) }`: keep the assignment, drop the lambda.
            if _ASSIGNMENT_RE.match(value):
                stack[-1].statements.append(value)
                stack.append(_Block())
                continue
            block = _Block()
            stack[-1].blocks.append((_block_name(value), block))
            stack.append(block)
        elif kind == "close":
            if len(stack) == 1:
                raise ConfigError("Unbalanced '}' in Gradle script")
            stack.pop()
        else:
            stack[-1].statements.append(value)
    if len(stack) != 1:
        raise ConfigError("Unclosed block in Gradle script")
    return root


def _block_name(header: str) -> str:
    match = _NAMED_BLOCK_RE.match(header)
    return match.group(1) if match else header


def _split_args(args: str) -> List[str]:
    """Splits call arguments on top-level commas."""
    parts: List[str] = []
    buf: List[str] = []
    depth = 0
    in_string = False
    for ch in args:
        if ch == '"':
            in_string = not in_string
        elif not in_string and ch == "(":
            depth += 1
        elif not in_string and ch == ")":
            depth -= 1
        elif not in_string and depth == 0 and ch == ",":
            parts.append("".join(buf).strip())
            buf = []
            continue
        buf.append(ch)
    tail = "".join(buf).strip()
    if tail:
        parts.append(tail)
    return parts


def parse_value(expr: str) -> Any:
    """Converts one Kotlin DSL expression into a descriptor value.

    Secret lookups (`System.getenv("X")`, `props["x"]`) become `${X}`
    references, and unknown expressions are returned as source text.
    """
    expr = expr.strip()
    match = _STRING_RE.match(expr)
    if match:
        return match.group(1).replace('\\"', '"')
    if _INT_RE.match(expr):
        return int(expr)
    if expr in ("true", "false"):
        return expr == "true"

    match = _FILE_RE.match(expr)
    if match:
        return parse_value(match.group(1))
    match = _GETENV_RE.match(expr)
    if match:
        return "${" + match.group(1) + "}"
    match = _SIGNING_REF_RE.match(expr)
    if match:
        return next(group for group in match.groups() if group)
    match = _PROPERTY_RE.match(expr)
    if match:
        return "${" + (match.group(1) or match.group(2)) + "}"
    match = _JAVA_VERSION_RE.match(expr)
    if match:
        return match.group(1)
    return expr


def _assignments(block: _Block) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for stmt in block.statements:
        match = _ASSIGNMENT_RE.match(stmt)
        if match:
            values[match.group(1)] = parse_value(match.group(2))
    return values


def _plugin_ids(block: _Block) -> List[str]:
    plugins = []
    for stmt in block.statements:
        match = _PLUGIN_ID_RE.match(stmt)
        if match:
            plugins.append(match.group(1))
            continue
        match = _KOTLIN_PLUGIN_RE.match(stmt)
        if match:
            plugins.append(f"org.jetbrains.kotlin.{match.group(1)}")
    return plugins


def _dependencies(block: _Block) -> List[Dict[str, str]]:
    deps = []
    for stmt in block.statements:
        match = _CALL_RE.match(stmt)
        if not match or match.group(1) not in DEPENDENCY_CONFIGURATIONS:
            continue
        notation = parse_value(match.group(2))
        if isinstance(notation, str):
            deps.append({"configuration": match.group(1), "notation": notation})
    return deps


def _build_type(block: _Block) -> Dict[str, Any]:
    values = _assignments(block)
    for stmt in block.statements:
        match = _CALL_RE.match(stmt)
        if not match or match.group(1) != "proguardFiles":
            continue
        files: List[Any] = []
        for arg in _split_args(match.group(2)):
            default = _DEFAULT_PROGUARD_RE.match(arg)
            files.append({"default": default.group(1)} if default else parse_value(arg))
        values["proguardFiles"] = files
    return values


def _android_section(android: _Block) -> Dict[str, Any]:
    section = _assignments(android)
    for name in ("compileOptions", "kotlinOptions", "defaultConfig"):
        block = android.child(name)
        if block is not None:
            section[name] = _assignments(block)

    signing_configs = android.child("signingConfigs")
    if signing_configs is not None:
        section["signingConfigs"] = {name: _assignments(b) for name, b in signing_configs.blocks}

    build_types = android.child("buildTypes")
    if build_types is not None:
        section["buildTypes"] = {name: _build_type(b) for name, b in build_types.blocks}

    dependencies = android.child("dependencies")
    if dependencies is not None:
        section["dependencies"] = _dependencies(dependencies)
    return section

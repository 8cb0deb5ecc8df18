"""Defines the command-line interface for the buildcfg application.

This module uses the `click` library to create the CLI. It serves as the
main entry point for all user interactions: checking a build descriptor,
inspecting its signing and plugin setup, converting Gradle scripts into
descriptors, and managing the tool's configuration.
"""
import io
import json
import logging
import sys
import warnings
from pathlib import Path
from typing import Any, Dict, Optional

import click
import tomli_w
from halo import Halo
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .core.config import Config
from .core.errors import ConfigError, DegradedSigningWarning
from .core.loader import load
from .core.model import ApplicationConfig, BuildType, SigningConfig
from .core.plugins import resolve_plugins
from .core.signing import select_signing_config
from .core.validator import validate_config
from .utils.descriptor import collect_secrets, load_descriptor
from .utils.gradle import parse_gradle_kts

console = Console(emoji=True)

logger = logging.getLogger(__name__)

_descriptor_argument = click.argument("descriptor", type=click.Path(exists=True, dir_okay=False, path_type=Path))
_config_option = click.option(
    "--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Path to a custom config file."
)
_key_properties_option = click.option(
    "--key-properties",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Properties file with signing credentials (default: key.properties next to the descriptor).",
)


class AliasedGroup(click.Group):
    """A custom click Group that supports command aliases and case-insensitivity."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._aliases: Dict[str, str] = {}

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        """Gets a command by name, checking for aliases and prefixes.

        Args:
            ctx: The click context.
            cmd_name: The command name entered by the user.

        Returns:
            The matched click command, or None.
        """
        cmd_name = cmd_name.lower()
        rv = super().get_command(ctx, cmd_name)
        if rv is not None:
            return rv
        if cmd_name in self._aliases:
            return super().get_command(ctx, self._aliases[cmd_name])
        matches = [x for x in self.list_commands(ctx) if x.startswith(cmd_name)]
        if not matches:
            return None
        if len(matches) == 1:
            return super().get_command(ctx, matches[0])
        ctx.fail(f"Ambiguous command: '{cmd_name}'. Matches: {', '.join(sorted(matches))}")
        return None

    def add_alias(self, alias: str, command_name: str) -> None:
        self._aliases[alias.lower()] = command_name.lower()


def _load_app_config(
    descriptor: Path, config_obj: Config, key_properties: Optional[Path] = None
) -> ApplicationConfig:
    """Reads, resolves secrets for, and loads a descriptor file.

    Exits with status 1 after printing the problem if loading fails.
    """
    try:
        tree = load_descriptor(descriptor)
        secrets = collect_secrets(config_obj, descriptor.resolve().parent, key_properties)
        return load(tree, secrets)
    except ConfigError as e:
        console.print(f"[red]Could not load {descriptor}: {e}[/red]")
        sys.exit(1)


@click.group(cls=AliasedGroup, invoke_without_command=True, context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="pybuildcfg")
@click.option("--verbose", is_flag=True, help="Enable verbose output.")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool, debug: bool) -> None:
    """Validate Android/Flutter build descriptors before packaging.

    buildcfg loads a declarative build descriptor (TOML, JSON or a
    build.gradle.kts script), checks identifiers, SDK levels, plugin order,
    signing credentials and proguard files, and reports whether the
    configuration can produce a release artifact or only a debug one.
    """
    if sys.platform == "win32" and isinstance(sys.stdout, io.TextIOWrapper):
        sys.stdout.reconfigure(encoding='utf-8')
    settings = Config()
    if not settings.get("colors", True):
        console.no_color = True
    verbose = verbose or settings.get("verbose", False)
    log_level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=log_level, format='%(asctime)s - %(levelname)s - %(message)s')
    logger.debug("Debug mode enabled.")

    if ctx.invoked_subcommand is None:
        console.print("Use 'buildcfg check <descriptor>' to validate a build descriptor, or 'buildcfg --help' for more commands.")


@main.command()
@_descriptor_argument
@_config_option
@_key_properties_option
@click.option("--json", "json_output", is_flag=True, help="Output results in JSON format.")
@click.option("--md", "md_output", is_flag=True, help="Output results in Markdown format.")
@click.option("--strict", is_flag=True, help="Fail on warnings as well as errors.")
def check(
    descriptor: Path,
    config_path: Optional[Path],
    key_properties: Optional[Path],
    json_output: bool,
    md_output: bool,
    strict: bool,
) -> None:
    """Load a descriptor and run all build-time checks against it.

    The command exits with a non-zero status if loading fails or any
    validator reports an error. In strict mode, warnings fail the check too.
    """
    config_obj = Config(config_path=config_path)
    if strict:
        config_obj.set("mode", "strict")

    app_config = _load_app_config(descriptor, config_obj, key_properties)
    base_dir = descriptor.resolve().parent

    if json_output or md_output:
        results = validate_config(app_config, config_obj, base_dir)
    else:
        with Halo(text=f"Checking {app_config.application_id}...", spinner="dots") as spinner:
            results = validate_config(app_config, config_obj, base_dir)
            spinner.succeed(f"Checks complete for {app_config.application_id}")

    if json_output:
        click.echo(json.dumps(results, indent=2))
    elif md_output:
        click.echo(_format_results_as_markdown(results))
    else:
        _display_results(results)

    if results["errors"] or (config_obj.is_strict() and results["warnings"]):
        sys.exit(1)


def _format_results_as_markdown(results: Dict[str, Any]) -> str:
    """Formats validation results into a Markdown string.

    Args:
        results: A result dictionary from `validate_config`.

    Returns:
        A Markdown-formatted string representing the results.
    """
    markdown = f"# Build Configuration Check for `{results['application_id']}`\n\n"
    markdown += f"- Version: {results['version']}\n"
    markdown += f"- Readiness: {results['readiness']}\n\n"
    if results["errors"]:
        markdown += "## Errors\n"
        for error in results["errors"]:
            markdown += f"- {error}\n"
    if results["warnings"]:
        markdown += "\n## Warnings\n"
        for warning in results["warnings"]:
            markdown += f"- {warning}\n"
    return markdown


def _display_results(results: Dict[str, Any]) -> None:
    """Displays validation results as formatted tables."""
    app_id = results["application_id"]
    summary_table = Table(title=f"Validator Summary for {app_id}")
    summary_table.add_column("Validator", style="cyan")
    summary_table.add_column("Category")
    summary_table.add_column("Status")
    for res in results["validator_results"]:
        status = "[green]Passed[/green]"
        if res.get("errors"):
            status = "[red]Failed[/red]"
        elif res.get("warnings"):
            status = "[yellow]Warning[/yellow]"
        summary_table.add_row(res["name"], res["category"], status)
    console.print(summary_table)

    errors, warnings_ = results["errors"], results["warnings"]
    if errors or warnings_:
        issues_table = Table(title=f"Issues for {app_id}")
        issues_table.add_column("Level", style="bold")
        issues_table.add_column("Message")
        for error in errors:
            issues_table.add_row("[red]ERROR[/red]", error)
        for warning in warnings_:
            issues_table.add_row("[yellow]WARNING[/yellow]", warning)
        console.print(issues_table)

    readiness_style = "green" if results["readiness"] == "release" else "yellow"
    summary = f"Version {results['version']}, readiness: {results['readiness']}. "
    summary += f"{len(errors)} error(s), {len(warnings_)} warning(s)."
    style = "red" if errors else readiness_style
    console.print(Panel(summary, style=style, title="Check Complete"))


@main.command()
@_descriptor_argument
@_config_option
@_key_properties_option
@click.option(
    "--build-type",
    type=click.Choice([t.value for t in BuildType]),
    default=BuildType.RELEASE.value,
    show_default=True,
    help="Build type to select a signing identity for.",
)
def signing(descriptor: Path, config_path: Optional[Path], key_properties: Optional[Path], build_type: str) -> None:
    """Show which signing identity a build type will use.

    Passwords are never printed.
    """
    config_obj = Config(config_path=config_path)
    app_config = _load_app_config(descriptor, config_obj, key_properties)

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", DegradedSigningWarning)
        selected = select_signing_config(app_config, build_type)

    if isinstance(selected, SigningConfig):
        table = Table(title=f"Signing for {app_config.application_id} ({build_type})")
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        table.add_row("Config", selected.name)
        table.add_row("Keystore", selected.store_file or "")
        table.add_row("Key Alias", selected.key_alias or "")
        table.add_row("Passwords", "provided")
        console.print(table)
    else:
        console.print(f"[bold]{build_type}[/bold] builds use the debug signing identity.")

    for warning in caught:
        if issubclass(warning.category, DegradedSigningWarning):
            console.print(f"[yellow]WARNING: {warning.message}[/yellow]")


@main.command()
@_descriptor_argument
@_config_option
def plugins(descriptor: Path, config_path: Optional[Path]) -> None:
    """Show the declared plugins in application order."""
    config_obj = Config(config_path=config_path)
    app_config = _load_app_config(descriptor, config_obj)
    try:
        refs = resolve_plugins(app_config)
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    table = Table(title=f"Plugins for {app_config.application_id}")
    table.add_column("#", justify="right")
    table.add_column("Plugin", style="cyan")
    table.add_column("Kind")
    for index, ref in enumerate(refs, start=1):
        table.add_row(str(index), ref.id, ref.kind.value)
    console.print(table)


@main.command()
@click.argument("gradle_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--format", "output_format", type=click.Choice(["json", "toml"]), default="json", show_default=True)
def convert(gradle_file: Path, output_format: str) -> None:
    """Print the descriptor read from a build.gradle.kts script.

    Literal passwords are carried over as-is; review the output before
    committing it anywhere.
    """
    try:
        descriptor = parse_gradle_kts(gradle_file.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ConfigError) as e:
        console.print(f"[red]Could not convert {gradle_file}: {e}[/red]")
        sys.exit(1)

    if output_format == "toml":
        click.echo(tomli_w.dumps(descriptor))
    else:
        click.echo(json.dumps(descriptor, indent=2))


@main.command()
@click.argument("action", type=click.Choice(['get', 'set', 'list']), required=True)
@click.argument("key", type=str, required=False)
@click.argument("value", type=str, required=False)
def config(action: str, key: Optional[str], value: Optional[str]) -> None:
    """Manage the buildcfg configuration.

    This command allows you to view and set configuration values that are
    stored in the user-level configuration file.

    \b
    ACTION:
        get <key>         Get a configuration value.
        set <key> <value> Set a configuration value.
        list              List all current configuration values.
    """
    config_obj = Config()
    if action == "list":
        console.print(Panel(json.dumps(config_obj.config, indent=2), title="Current Configuration"))
    elif action == "get":
        if not key:
            console.print("[red]Error: 'get' action requires a key.[/red]")
            sys.exit(1)
        click.echo(json.dumps(config_obj.get(key)))
    elif action == "set":
        if not key or value is None:
            console.print("[red]Error: 'set' action requires a key and a value.[/red]")
            sys.exit(1)
        processed_value = _parse_config_value(value)
        config_obj.set(key, processed_value)
        try:
            config_obj.save_user_config()
            console.print(f"[green]'{key}' set to '{processed_value}' and saved to user config.[/green]")
        except IOError as e:
            console.print(f"[red]Error saving configuration: {e}[/red]")
            sys.exit(1)


def _parse_config_value(value: str) -> Any:
    """Casts a command-line value to bool, int, list or str."""
    if value.lower() in ('true', 'false'):
        return value.lower() == 'true'
    if value.isdigit():
        return int(value)
    if "," in value:
        return [v.strip() for v in value.split(",") if v.strip()]
    return value


main.add_alias('c', 'check')
main.add_alias('sign', 'signing')

if __name__ == "__main__":
    main()

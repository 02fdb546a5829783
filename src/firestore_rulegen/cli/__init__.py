"""CLI module for compiling schemas into Firestore security rules.

Provides commands to compile a schema, check it for gaps the compiler
does not detect, list its models, and convert the flattened JSON encoding
into the persisted one.

Usage:
    firestore-rulegen compile schema.json
    firestore-rulegen compile schema.json -o firestore.rules --tabs
    firestore-rulegen compile --strict
    firestore-rulegen check schema.json
    firestore-rulegen models schema.json
    firestore-rulegen convert flat.json -o schema.json

Commands:
    compile   - Compile a schema into rules text
    check     - Report dangling references, name collisions and warnings
    models    - List models with their access settings
    convert   - Rewrite a schema in the persisted (list) encoding

Settings not given on the command line come from rulegen.toml in the
current directory (or ``--config``), if present.
"""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from firestore_rulegen.compiler import compile_rules, expand_indent, validator_name
from firestore_rulegen.config.loader import load_rulegen_config
from firestore_rulegen.config.models import RulegenConfig
from firestore_rulegen.schema.checker import check_schema
from firestore_rulegen.schema.loader import SchemaParseError, dumps_schema, load_schema
from firestore_rulegen.schema.models import Schema

console = Console()

logger = logging.getLogger(__name__)


# ============================================================================
# Settings and schema resolution (CLI-internal helpers)
# ============================================================================


def _configure_logging(verbose: bool) -> None:
    """Route library logging through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_settings(args: argparse.Namespace) -> RulegenConfig:
    """Load rulegen.toml, falling back to defaults when none exists.

    An explicit ``--config`` path must exist; the implicit one in the
    current directory is optional.

    Raises:
        FileNotFoundError: If ``--config`` points to a missing file.
    """
    config_path = getattr(args, "config", None)
    if config_path:
        return load_rulegen_config(config_path=Path(config_path))

    try:
        return load_rulegen_config()
    except FileNotFoundError:
        logger.debug("No rulegen.toml in current directory, using defaults")
        return RulegenConfig()


def _load_schema_or_report(schema_file: str | Path) -> Schema | None:
    """Load a schema, printing the error and returning None on failure."""
    try:
        return load_schema(schema_file)
    except (FileNotFoundError, SchemaParseError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return None


def _write_output(text: str, output_file: str | None) -> None:
    if output_file:
        Path(output_file).write_text(text + "\n")
        console.print(f"[bold green]v[/bold green] Wrote [cyan]{output_file}[/cyan]")
    else:
        sys.stdout.write(text + "\n")


# ============================================================================
# Command implementations
# ============================================================================


def cmd_compile(args: argparse.Namespace) -> int:
    """Compile a schema into rules text.

    Args:
        args: Parsed CLI arguments with schema, output, indent, tabs, strict.

    Returns:
        0 on success, 1 on load failure or (with ``--strict``) check errors.
    """
    try:
        settings = _load_settings(args)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    schema = _load_schema_or_report(args.schema or settings.schema_file)
    if schema is None:
        return 1

    result = check_schema(schema)
    if not result.valid:
        if args.strict or settings.strict:
            console.print("[bold red]x[/bold red] Refusing to compile")
            console.print(result.format_report(), markup=False)
            return 1
        logger.warning(f"Schema has {result.error_count} errors; rules may not load")

    rules = compile_rules(schema)

    if args.tabs:
        indent = "\t"
    elif args.indent is not None:
        indent = args.indent
    else:
        indent = settings.indent

    _write_output(expand_indent(rules, indent), args.output or settings.output_file)
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Check a schema for dangling references and other silent gaps.

    Args:
        args: Parsed CLI arguments with schema.

    Returns:
        0 if the schema has no errors (warnings allowed), 1 otherwise.
    """
    try:
        settings = _load_settings(args)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    schema = _load_schema_or_report(args.schema or settings.schema_file)
    if schema is None:
        return 1

    result = check_schema(schema)

    if result.valid:
        console.print("[bold green]v[/bold green] Schema is valid")
        if result.warning_count:
            console.print(result.format_report(), markup=False, style="yellow")
        return 0
    else:
        console.print("[bold red]x[/bold red] Schema has errors")
        console.print(result.format_report(), markup=False)
        return 1


def cmd_models(args: argparse.Namespace) -> int:
    """List models with their access settings.

    Args:
        args: Parsed CLI arguments with schema.

    Returns:
        0 on success, 1 if the schema cannot be loaded.
    """
    try:
        settings = _load_settings(args)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    schema = _load_schema_or_report(args.schema or settings.schema_file)
    if schema is None:
        return 1

    def flag(required: bool | None) -> str:
        return "[bold]auth[/bold]" if required else "[dim]public[/dim]"

    table = Table(title="Models", show_header=True, header_style="bold")
    table.add_column("Model")
    table.add_column("Validator", style="dim")
    table.add_column("Read")
    table.add_column("Get")
    table.add_column("Create")
    table.add_column("Update")
    table.add_column("Delete")
    table.add_column("Owner")
    table.add_column("Fields", justify="right")

    for model in schema.models:
        table.add_row(
            f"[bold cyan]{escape(model.name)}[/bold cyan]",
            validator_name(model.name),
            flag(model.read_all_auth_required),
            # "-" when reads are not split into get and list
            "-" if model.read_one_auth_required is None else flag(model.read_one_auth_required),
            flag(model.create_auth_required),
            flag(model.update_auth_required),
            flag(model.delete_auth_required),
            model.effective_owner_field or "-",
            str(len(model.fields)),
        )

    console.print(table)
    return 0


def cmd_convert(args: argparse.Namespace) -> int:
    """Rewrite a schema in the persisted (list) encoding.

    Args:
        args: Parsed CLI arguments with schema and output.

    Returns:
        0 on success, 1 if the schema cannot be loaded.
    """
    schema = _load_schema_or_report(args.schema)
    if schema is None:
        return 1

    _write_output(dumps_schema(schema), args.output)
    return 0


# ============================================================================
# Main entry point
# ============================================================================


def main() -> int:
    """Main CLI entry point.

    Parses command line arguments and dispatches to appropriate handler.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        prog="firestore-rulegen",
        description="Compile data model schemas into Firestore security rules",
    )

    # Global options
    parser.add_argument(
        "--config",
        default=None,
        help="Path to rulegen.toml (default: ./rulegen.toml if present)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # compile command
    p_compile = subparsers.add_parser(
        "compile",
        help="Compile a schema into rules text",
    )
    p_compile.add_argument(
        "schema",
        nargs="?",
        default=None,
        help="Path to schema JSON (default: [schema] file from config)",
    )
    p_compile.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write rules to this file instead of stdout",
    )
    indent_group = p_compile.add_mutually_exclusive_group()
    indent_group.add_argument(
        "--indent",
        default=None,
        help="Indentation replacing tabs (default: two spaces)",
    )
    indent_group.add_argument(
        "--tabs",
        action="store_true",
        help="Keep tab indentation",
    )
    p_compile.add_argument(
        "--strict",
        action="store_true",
        help="Refuse to compile when the schema check reports errors",
    )
    p_compile.set_defaults(func=cmd_compile)

    # check command
    p_check = subparsers.add_parser(
        "check",
        help="Report dangling references, name collisions and warnings",
    )
    p_check.add_argument("schema", nargs="?", default=None, help="Path to schema JSON")
    p_check.set_defaults(func=cmd_check)

    # models command
    p_models = subparsers.add_parser(
        "models",
        help="List models with their access settings",
    )
    p_models.add_argument("schema", nargs="?", default=None, help="Path to schema JSON")
    p_models.set_defaults(func=cmd_models)

    # convert command
    p_convert = subparsers.add_parser(
        "convert",
        help="Rewrite a schema in the persisted (list) encoding",
    )
    p_convert.add_argument("schema", help="Path to schema JSON in either encoding")
    p_convert.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write the converted schema to this file instead of stdout",
    )
    p_convert.set_defaults(func=cmd_convert)

    args = parser.parse_args()
    _configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

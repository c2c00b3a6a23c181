"""Command-line interface for componentsplit."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from componentsplit import Modularizer, ModularizerConfig
from componentsplit.core.error_handling import InvalidConfigurationError, ModularizerError
from componentsplit.models.code_element import ModularizationResult


def _build_config(args: argparse.Namespace) -> ModularizerConfig:
    config = ModularizerConfig.from_file(args.config) if args.config else ModularizerConfig()
    updates = {}
    if getattr(args, "import_path", None):
        updates["import_path"] = args.import_path
    if getattr(args, "extension", None):
        ext = args.extension if args.extension.startswith(".") else "." + args.extension
        updates["file_extension"] = ext
    if getattr(args, "prettier", False):
        updates["formatting"] = config.formatting.model_copy(update={"use_prettier": True})
    if updates:
        # Round-trip through validation so CLI values get the same checks as file values
        try:
            config = ModularizerConfig.model_validate({**config.model_dump(), **updates})
        except PydanticValidationError as e:
            first = e.errors()[0]
            setting = ".".join(str(part) for part in first.get("loc", ())) or "<root>"
            raise InvalidConfigurationError(setting, first.get("input"), first.get("msg", "invalid value")) from e
    if getattr(args, "reserved", None):
        config = config.with_reserved(*args.reserved)
    return config


def _show_result(result: ModularizationResult, host_name: str, console: Console, verbose: bool = False) -> None:
    lexer = "tsx" if host_name.endswith(".tsx") else "jsx"
    console.print(Panel(Syntax(result.updated_app, lexer, line_numbers=False), title=f"Updated {host_name}"))
    for module in result.components:
        console.print(Panel(Syntax(module.code, lexer, line_numbers=False), title=f"components/{module.filename}"))
    for warning in result.warnings:
        console.print(f"[yellow]warning:[/yellow] {escape(warning)}")
    if verbose:
        for note in result.diagnostics:
            console.print(f"[dim]note:[/dim] {escape(note)}")
    console.print(
        f"[bold green]Extracted {result.extracted_count} component(s)[/bold green]"
        + (f" in {result.processing_time}ms" if result.processing_time is not None else "")
    )


def _resolve_input(args: argparse.Namespace, modularizer: Modularizer, console: Console) -> str:
    """Return ``args.file``, or the first entry candidate found under ``args.base_dir``."""
    if args.file is None:
        path = str(modularizer.find_entry_file(args.base_dir))
        if not args.raw_json:
            console.print(f"[green]Found input file:[/green] {escape(path)}")
        return path
    if not os.path.exists(args.file):
        console.print(f"[bold red]File not found:[/bold red] {escape(args.file)}")
        sys.exit(1)
    return args.file


def _split(args: argparse.Namespace, console: Console) -> None:
    """Split the host file into component modules."""
    modularizer = Modularizer(_build_config(args))
    host_file = _resolve_input(args, modularizer, console)
    result = modularizer.run(host_file, components_dir=args.components_dir, dry_run=args.dry_run)
    if args.raw_json:
        print(json.dumps(result.to_payload(), indent=2))
        return
    if not result.components:
        console.print(Panel("No extractable components found. The file is already modular.", style="blue"))
        return
    _show_result(result, os.path.basename(host_file), console, verbose=args.verbose or args.debug)
    if args.dry_run:
        console.print(Panel("Dry run: no files written", style="yellow"))
    else:
        console.print(Panel("Modularization complete", style="green"))


def _scan(args: argparse.Namespace, console: Console) -> None:
    """List the components ``split`` would extract."""
    modularizer = Modularizer(_build_config(args))
    host_file = _resolve_input(args, modularizer, console)
    candidates = modularizer.scan(Modularizer.load_file(host_file))
    if args.raw_json:
        rows = [
            {
                "name": c.name,
                "form": c.declaration_form.value,
                "lines": [c.span.start_line, c.span.end_line],
                "usesRuntime": c.uses_external_runtime,
                "unresolved": list(c.unresolved_references),
            }
            for c in candidates
        ]
        print(json.dumps(rows, indent=2))
        return
    table = Table(title=f"Extractable components in {host_file}")
    table.add_column("Name", style="bold")
    table.add_column("Form")
    table.add_column("Lines")
    table.add_column("Runtime")
    table.add_column("Unresolved")
    for c in candidates:
        table.add_row(
            c.name,
            c.declaration_form.value,
            f"{c.span.start_line}-{c.span.end_line}",
            "yes" if c.uses_external_runtime else "no",
            ", ".join(c.unresolved_references),
        )
    console.print(table)


def _add_common(sub_parser: argparse.ArgumentParser) -> None:
    sub_parser.add_argument(
        "file",
        nargs="?",
        help="Host source file (default: first existing entry candidate, e.g. App.jsx or src/App.jsx)",
    )
    sub_parser.add_argument(
        "--base-dir",
        default=".",
        help="Directory searched for entry candidates when no file is given",
    )
    sub_parser.add_argument("--config", help="JSON configuration file")
    sub_parser.add_argument(
        "--reserved",
        action="append",
        metavar="NAME",
        help="Extra reserved entry name that is never extracted (repeatable)",
    )
    sub_parser.add_argument("--import-path", help="Import path prefix used by the host (default ./components)")
    sub_parser.add_argument("--raw-json", action="store_true", help="Output raw JSON")


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``componentsplit`` command."""

    console = Console()
    parser = argparse.ArgumentParser(description="Split a React component file into one module per component")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--quiet", action="store_true", help="Reduce logs to errors only")
    sub = parser.add_subparsers(dest="command")

    split_p = sub.add_parser("split", help="Extract components into separate files")
    _add_common(split_p)
    split_p.add_argument("--components-dir", help="Output directory (default: <host dir>/components)")
    split_p.add_argument("--extension", help="Extension of generated files (default .jsx)")
    split_p.add_argument("--prettier", action="store_true", help="Format output with the prettier executable")
    split_p.add_argument("--dry-run", action="store_true", help="Show the result without writing files")

    scan_p = sub.add_parser("scan", help="List extractable components without writing")
    _add_common(scan_p)

    args = parser.parse_args(argv)
    if args.debug:
        log_level = logging.DEBUG
    elif args.quiet:
        log_level = logging.ERROR
    elif args.verbose:
        log_level = logging.INFO
    else:
        log_level = logging.WARNING
    logging.basicConfig(level=log_level)

    try:
        if args.command == "split":
            _split(args, console)
        elif args.command == "scan":
            _scan(args, console)
        else:
            parser.print_help()
    except ModularizerError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        sys.exit(1)
    except OSError as e:
        console.print(f"[bold red]I/O error:[/bold red] {escape(str(e))}")
        sys.exit(1)


if __name__ == "__main__":
    main()

# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Command-line front end: validate, link and complete local references."""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..completion import AutoCompleteProvider
from ..config import LocalActionsConfig, load_and_validate_config
from ..document import Position, TextDocument, Workspace
from ..extension import LocalActionsExtension
from ..links import LocalFileDocumentLinkProvider
from ..logconfig import DocumentContext, configure_logging
from ..parser import LocalFileUsesParser
from ..validator import GITHUB_DIR, Diagnostic, DiagnosticCollection, Validator, find_base_path
from .errors import show_error

console = Console()


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for all commands."""
    parser = argparse.ArgumentParser(
        description="Check local workflow and action references in GitHub workflow files",
        prog="local-actions",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: LOCAL_GITHUB_ACTIONS_LOG_LEVEL or WARNING)",
    )
    parser.add_argument(
        "--root",
        default=None,
        help="Repository root used when a file has no .github ancestor (default: cwd)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run", required=True)

    validate_parser = subparsers.add_parser(
        "validate",
        help="Report missing or misplaced local references",
        description=(
            "Validate local 'uses:' references in workflow and action files. "
            "Without a path, every YAML file under <root>/.github/workflows and "
            "<root>/.github/actions is checked."
        ),
    )
    validate_parser.add_argument(
        "paths",
        nargs="*",
        help="Workflow/action files or directories to validate",
    )
    validate_parser.add_argument(
        "--format",
        choices=["text", "table", "json"],
        default="text",
        help="Output format (default: text)",
    )
    validate_parser.add_argument(
        "--no-file-exist-errors",
        action="store_true",
        help="Do not report references whose target does not exist",
    )
    validate_parser.add_argument(
        "--no-file-placement-errors",
        action="store_true",
        help="Do not report actions under .github/workflows or workflows under .github/actions",
    )
    validate_parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only output diagnostics",
    )

    links_parser = subparsers.add_parser("links", help="List resolved local references")
    links_parser.add_argument("path", help="Workflow or action file")
    links_parser.add_argument("--format", choices=["text", "json"], default="text")

    complete_parser = subparsers.add_parser(
        "complete", help="Suggest local workflows/actions for a 'uses:' line"
    )
    complete_parser.add_argument("path", help="Workflow or action file")
    complete_parser.add_argument("line", type=int, help="1-based line number")
    complete_parser.add_argument("column", type=int, help="1-based column of the cursor")
    complete_parser.add_argument("--format", choices=["text", "json"], default="text")

    return parser


def _load_config(args: argparse.Namespace) -> LocalActionsConfig:
    overrides: Dict[str, Any] = {}
    if getattr(args, "no_file_exist_errors", False):
        overrides["file_exist_errors"] = False
    if getattr(args, "no_file_placement_errors", False):
        overrides["file_placement_errors"] = False
    if args.log_level:
        overrides["log_level"] = args.log_level
    return load_and_validate_config(**overrides)


def _root(args: argparse.Namespace) -> Path:
    return Path(args.root).resolve() if args.root else Path.cwd()


def _workspace_for(path: Path, args: argparse.Namespace) -> Workspace:
    return Workspace(find_base_path(path.resolve()) or _root(args))


def _read(path: Path) -> Optional[TextDocument]:
    try:
        return TextDocument.from_path(path)
    except (OSError, UnicodeDecodeError) as exc:
        show_error(f"Could not read {path}", str(exc))
        return None


def collect_targets(paths: List[str], root: Path) -> List[Path]:
    """Expand *paths* into the workflow/action files to validate."""
    if not paths:
        github_dir = root / GITHUB_DIR
        if not github_dir.is_dir():
            return []
        paths = [str(github_dir)]

    targets: List[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            for candidate in sorted(path.rglob("*")):
                if candidate.is_file() and LocalActionsExtension.matches(candidate.resolve()):
                    targets.append(candidate)
        else:
            targets.append(path)
    return targets


def _diagnostic_dict(path: Path, diagnostic: Diagnostic) -> Dict[str, Any]:
    return {
        "file": str(path),
        "line": diagnostic.range.start.line + 1,
        "column": diagnostic.range.start.character + 1,
        "end_line": diagnostic.range.end.line + 1,
        "end_column": diagnostic.range.end.character + 1,
        "severity": diagnostic.severity.value,
        "message": diagnostic.message,
        "source": diagnostic.source,
    }


def print_result_text(results: Dict[Path, List[Diagnostic]]):
    """Print diagnostics one per line."""
    for path, diagnostics in results.items():
        for diagnostic in diagnostics:
            console.print(f"[red]{escape(str(path))}:{escape(str(diagnostic))}[/red]")


def print_result_table(results: Dict[Path, List[Diagnostic]]):
    """Print diagnostics in table format."""
    if not any(results.values()):
        return

    table = Table(title="Local Reference Diagnostics")
    table.add_column("File", style="cyan")
    table.add_column("Line", style="magenta")
    table.add_column("Severity", style="bold")
    table.add_column("Message")

    for path, diagnostics in results.items():
        for diagnostic in diagnostics:
            start = diagnostic.range.start
            table.add_row(
                escape(str(path)),
                f"{start.line + 1}:{start.character + 1}",
                f"[red]{diagnostic.severity.value}[/red]",
                escape(diagnostic.message),
            )

    console.print(table)


def cmd_validate(args: argparse.Namespace) -> int:
    """Execute the validate command."""
    root = _root(args)
    targets = collect_targets(args.paths, root)
    if not targets:
        if not args.quiet and args.format != "json":
            console.print(f"No workflow or action files found under {escape(str(root))}")
        if args.format == "json":
            print(json.dumps([]))
        return 0

    collection = DiagnosticCollection()
    validator = Validator(collection, args.config, Workspace.exists)
    results: Dict[Path, List[Diagnostic]] = {}
    failed = False

    for path in targets:
        document = _read(path)
        if document is None:
            failed = True
            continue
        with DocumentContext.bind(document.uri):
            refs = LocalFileUsesParser.parse(document)
            if not validator.validate(document, refs):
                if not args.quiet and args.format != "json":
                    console.print(
                        f"[yellow]Skipped {escape(str(path))}: no {GITHUB_DIR} directory above it[/yellow]"
                    )
                continue
        results[path] = collection.get(document.uri)

    if args.format == "json":
        print(json.dumps([_diagnostic_dict(p, d) for p, ds in results.items() for d in ds], indent=2))
    elif args.format == "table":
        print_result_table(results)
    else:
        print_result_text(results)

    count = sum(len(ds) for ds in results.values())
    if args.format != "json" and not args.quiet:
        if count == 0:
            console.print(f"[green]{len(results)} file(s) checked, all local references valid.[/green]")
        else:
            console.print(
                f"\nValidation complete: [red]{count} error{'s' if count != 1 else ''}[/red] "
                f"in {len(results)} file(s)"
            )

    return 1 if count or failed else 0


def cmd_links(args: argparse.Namespace) -> int:
    path = Path(args.path)
    document = _read(path)
    if document is None:
        return 1

    provider = LocalFileDocumentLinkProvider(Validator(DiagnosticCollection(), args.config))
    with DocumentContext.bind(document.uri):
        links = provider.provide_document_links(document)

    if args.format == "json":
        print(json.dumps([
            {
                "line": link.range.start.line + 1,
                "column": link.range.start.character + 1,
                "target": str(link.target),
            }
            for link in links
        ], indent=2))
    else:
        for link in links:
            start = link.range.start
            console.print(f"{start.line + 1}:{start.character + 1} -> {escape(str(link.target))}")
    return 0


def cmd_complete(args: argparse.Namespace) -> int:
    path = Path(args.path)
    document = _read(path)
    if document is None:
        return 1
    if not 1 <= args.line <= document.line_count:
        console.print(f"[red]Error: line {args.line} is outside {escape(str(path))}[/red]")
        return 1

    line = document.line_at(args.line - 1)
    character = max(0, min(args.column - 1, len(line.text)))
    provider = AutoCompleteProvider(_workspace_for(path, args))
    with DocumentContext.bind(document.uri):
        items = provider.provide_completion_items(document, Position(args.line - 1, character))

    if args.format == "json":
        print(json.dumps([{"label": i.label, "detail": i.detail} for i in items], indent=2))
    else:
        for item in items:
            console.print(f"{escape(item.label)}  [dim]{escape(item.detail)}[/dim]")
    return 0


COMMANDS = {
    "validate": cmd_validate,
    "links": cmd_links,
    "complete": cmd_complete,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        args.config = _load_config(args)
    except ValidationError as exc:
        console.print(f"[red]Invalid configuration:[/red]\n{escape(str(exc))}")
        return 2

    configure_logging(args.config.log_level)
    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())

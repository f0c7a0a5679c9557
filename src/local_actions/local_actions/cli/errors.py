# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Readable error panels for files the CLI cannot load."""

import re
from typing import Optional, Tuple

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

console = Console(stderr=True)

ERROR_PATTERNS = {
    "missing": {
        "pattern": r"(no such file or directory|cannot find the (file|path))",
        "message": "File not found",
        "action": "Check the path, or run from the repository root",
    },
    "directory": {
        "pattern": r"(is a directory)",
        "message": "Expected a file, got a directory",
        "action": "Pass the directory without a file name to validate everything inside it",
    },
    "permission": {
        "pattern": r"(permission denied|access denied|operation not permitted)",
        "message": "Permission denied",
        "action": "Check file permissions or run with appropriate privileges",
    },
    "encoding": {
        "pattern": r"(codec can't decode|invalid (start|continuation) byte)",
        "message": "File is not valid UTF-8",
        "action": "Re-save the workflow file with UTF-8 encoding",
    },
}


def detect_error_pattern(output: str) -> Optional[Tuple[str, str]]:
    for pattern_info in ERROR_PATTERNS.values():
        if re.search(pattern_info["pattern"], output, re.IGNORECASE):
            return (pattern_info["message"], pattern_info["action"])
    return None


def show_error(title: str, output: str):
    """Display a formatted error, with a fix hint when the cause is recognised."""
    detected = detect_error_pattern(output)
    if detected:
        message, action = detected
        error_text = Text()
        error_text.append(f"✗ {title}\n\n", style="bold red")
        error_text.append(f"{message}\n\n", style="red")
        error_text.append("→ Fix: ", style="bold yellow")
        error_text.append(f"{action}\n", style="yellow")
        console.print(Panel(error_text, border_style="red", expand=False))
    else:
        console.print(Panel(Text(f"✗ {title}", style="bold red"), border_style="red", expand=False))
        console.print(f"  [dim]│[/dim] {escape(output)}")

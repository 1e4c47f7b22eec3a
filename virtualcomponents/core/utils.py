"""
Helpers shared by the application and its plugins
"""

import io
import shutil
from typing import Any, Dict, Iterable, Mapping

from rich.console import Console
from rich.table import Table

from virtualcomponents.config.settings import get_settings

DEFAULT_TERM_WIDTH = 80


def term_width() -> int:
    """Width of the terminal, or TERM_WIDTH when configured."""
    configured = get_settings().TERM_WIDTH
    if configured:
        return configured
    return shutil.get_terminal_size((DEFAULT_TERM_WIDTH, 24)).columns


def merge_hashes(lefthash: Mapping[str, Any], righthash: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Merge two mappings recursively; values from ``righthash`` win.

    Neither argument is modified.
    """
    merged: Dict[str, Any] = dict(lefthash)
    for key, value in righthash.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = merge_hashes(merged[key], value)
        else:
            merged[key] = value
    return merged


def render_table(rows: Iterable[str], width: int, header: str = "") -> str:
    """Render a one-column table as plain text."""
    table = Table(show_header=bool(header), width=width)
    table.add_column(header, overflow="fold")
    for row in rows:
        table.add_row(row)

    buffer = io.StringIO()
    console = Console(file=buffer, width=width, force_terminal=False, color_system=None)
    console.print(table)
    return buffer.getvalue().rstrip("\n")

"""
Output module for qtpods.

Provides consistent output formatting across all commands:
- JSONL (default): Newline-delimited JSON for piping
- Pretty: Human-readable tables using Rich

Usage:
    from qtpods.output import emit, emit_error, emit_result

    # Stream pods as JSONL (default) or pretty table
    emit(pods, pretty=pretty)

    # Report an operation result
    emit_result(result, pretty=pretty)

    # Emit error to stderr
    emit_error("Not a git repository", type="precondition", context={"path": "/foo"})
"""

import json
import sys
from typing import Iterable, Any, Dict, Optional, List

from rich.console import Console
from rich.table import Table

from .domain.operation import OperationResult, OperationStatus

console = Console()
err_console = Console(stderr=True)

DEFAULT_COLUMNS = ['name', 'url', 'author', 'license', 'description']


def emit(
    items: Iterable[Any],
    pretty: bool = False,
    columns: Optional[List[str]] = None,
    err: bool = False
) -> None:
    """
    Emit items as JSONL or pretty table.

    Args:
        items: Items to emit (should have to_dict() method or be dicts)
        pretty: If True, render as table. If False, output JSONL
        columns: Column names for table (DEFAULT_COLUMNS if None)
        err: If True, output to stderr instead of stdout
    """
    if pretty:
        _emit_table(items, columns or DEFAULT_COLUMNS, err)
    else:
        _emit_jsonl(items, sys.stderr if err else sys.stdout)


def _to_dict(item: Any) -> Dict[str, Any]:
    if hasattr(item, 'to_dict'):
        return item.to_dict()
    if isinstance(item, dict):
        return item
    return {'value': str(item)}


def _emit_jsonl(items: Iterable[Any], stream) -> None:
    for item in items:
        print(json.dumps(_to_dict(item), ensure_ascii=False), file=stream, flush=True)


def _emit_table(items: Iterable[Any], columns: List[str], err: bool) -> None:
    rows = [_to_dict(item) for item in items]
    out = err_console if err else console

    if not rows:
        out.print("[yellow]No pods found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    for col in columns:
        table.add_column(col)
    for row in rows:
        table.add_row(*[_format_value(row.get(col, '')) for col in columns])
    out.print(table)


def _format_value(value: Any, max_len: int = 50) -> str:
    """Format a value for table display."""
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'Yes' if value else 'No'
    s = str(value)
    if len(s) > max_len:
        return s[:max_len-3] + '...'
    return s


def emit_result(result: OperationResult, pretty: bool = False) -> None:
    """
    Report an operation result.

    JSONL mode prints a single line with the full result; pretty mode
    prints one line per pod and a summary.
    """
    if not pretty:
        print(json.dumps(result.to_dict(), ensure_ascii=False), flush=True)
        return

    for detail in result.details:
        if detail.status == OperationStatus.SUCCESS:
            console.print(f"  [green]✓[/green] {detail.pod_name}: {detail.action} ok")
        else:
            console.print(f"  [red]✗[/red] {detail.pod_name}: {detail.error}")

    if result.success:
        suffix = " (project files regenerated)" if result.regenerated else ""
        console.print(f"[green]{result.operation} succeeded[/green]{suffix}")
    else:
        console.print(f"[red]{result.operation} failed[/red]")
        if result.error:
            console.print(f"  {result.error}")


def emit_error(
    error: str,
    type: str = "error",
    context: Optional[Dict[str, Any]] = None
) -> None:
    """
    Emit error to stderr as JSON.

    Args:
        error: Error message
        type: Error type (e.g., "precondition", "config_error")
        context: Additional context dict
    """
    obj = {
        'error': error,
        'type': type
    }
    if context:
        obj['context'] = context

    print(json.dumps(obj, ensure_ascii=False), file=sys.stderr, flush=True)

"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from biblionet.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from biblionet.services.result import ServiceResult

# Vertices listed in the human plot summary before truncating.
MAX_TABLE_ROWS = 50


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode: retained vertex ids."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    vertices = result.data.get("vertices")
    if vertices:
        return "\n".join(str(v["id"]) for v in vertices)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="bn.ok"), Text(f"  {result.op}", style="bn.op"))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="bn.key")
    style = "bn.path" if key in ("output", "network_file") else ""
    console.print(k, Text(str(value), style=style), sep="")


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the telemetry span tree (verbose only)."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
    prefix = " " * indent
    duration = span_data.get("duration_ms", 0.0)
    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {span_data.get('name', '?')}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _vertex_table(vertices: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Vertex", style="bn.id")
    table.add_column("Degree", style="bn.degree", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Community", justify="right")
    table.add_column("Color")

    for v in vertices[:MAX_TABLE_ROWS]:
        color = v.get("color", "")
        table.add_row(
            str(v["id"]),
            str(v.get("degree", "")),
            f"{float(v.get('size', 0.0)):.2f}",
            str(v.get("community", "")),
            Text(color, style=color) if color else "",
        )
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="bn.error"),
        Text(f"  {result.op}", style="bn.op"),
        Text(" — "),
        msg,
        sep="",
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Plot renderer ─────────────────────────────────────────────────────


def _render_plot(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the network summary: counts, output, then the vertex table."""
    d = result.data
    _status_line(console, result)
    for key in ("layout", "cluster", "threshold", "vertex_count", "edge_count", "community_count"):
        if d.get(key) is not None:
            _field(console, key, d[key])
    if "output" in d:
        _field(console, "output", d["output"])
    vos = d.get("vosviewer")
    if vos:
        if vos.get("network_file"):
            _field(console, "network_file", vos["network_file"])
        if vos.get("exit_status") is not None:
            _field(console, "exit_status", vos["exit_status"])

    vertices = d.get("vertices") or []
    if vertices:
        console.print()
        console.print(_vertex_table(vertices))
        hidden = len(vertices) - MAX_TABLE_ROWS
        if hidden > 0:
            console.print(Text(f"  … {hidden} more", style="dim"))
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "plot": _render_plot,
}

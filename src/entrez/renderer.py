"""Short summaries of ELink and EGQuery results, plus rich terminal output."""

from __future__ import annotations

from typing import Iterable

from rich.console import Console
from rich.text import Text

from entrez.models import (
    DatabaseCountMap,
    HistoryLinks,
    LinkCheck,
    LinkedDatabases,
    LinkResult,
    Linkout,
    Linkouts,
    NeighborLinks,
    RawDocument,
)

console = Console()

# Names listed in a one-line summary before the rest are counted.
MAX_NAMES = 10
URL_PREVIEW = 26


def _summarize(names: Iterable[str], noun: str) -> str:
    names = list(names)
    shown = ", ".join(names[:MAX_NAMES])
    if len(names) > MAX_NAMES:
        shown += f", ... (+{len(names) - MAX_NAMES} more)"
    line = f"{len(names)} {noun}"
    if shown:
        line += f": {shown}"
    return line


def _truncate(value: str, limit: int = URL_PREVIEW) -> str:
    if len(value) <= limit:
        return value
    return value[:limit] + "..."


def _summary_lines(result: LinkResult) -> list[str]:
    data = result.data
    if isinstance(data, NeighborLinks):
        lines = [f" links: {_summarize(data.links, 'databases')}"]
        if data.scores is not None:
            lines.append(f" scores: {_summarize(data.scores, 'databases')}")
        return lines
    if isinstance(data, HistoryLinks):
        return [
            f" web_env: {_truncate(data.web_env)}",
            f" query_keys: {_summarize(data.query_keys, 'databases')}",
        ]
    if isinstance(data, LinkedDatabases):
        return [f" linked_databases: {_summarize(data.linked_databases, 'databases')}"]
    if isinstance(data, LinkCheck):
        return [f" check: {_summarize(data.check, 'IDs')}"]
    if isinstance(data, Linkouts):
        return [f" linkouts: {_summarize(data.linkouts, 'IDs')}"]
    if isinstance(data, RawDocument):
        return [f" document: <{data.document.tag}> root element"]
    return []


def describe(result: LinkResult) -> str:
    """Describe a LinkResult without printing its payload."""
    lines = [f"elink result ({result.mode}) with contents:"]
    lines.append(result.content.rstrip("\n"))
    lines.append("summary:")
    lines.extend(_summary_lines(result))
    return "\n".join(lines)


def describe_linkout(linkout: Linkout) -> str:
    return f"Linkout from {linkout.provider}\n url: {_truncate(linkout.url)}"


def describe_counts(counts: DatabaseCountMap) -> str:
    if not counts:
        return "No databases reported."
    width = max(len(name) for name in counts)
    return "\n".join(f"{name.ljust(width)}  {count}" for name, count in counts.items())


# --- Terminal rendering ---


def _render_warnings(warnings: Iterable[str]) -> None:
    for w in warnings:
        console.print(f"[yellow]Warning: {w}[/yellow]")


def _render_payload(result: LinkResult) -> None:
    data = result.data
    if isinstance(data, NeighborLinks):
        for name, ids in data.links.items():
            console.print(Text(f"{name} ({len(ids)})", style="bold cyan"))
            if data.scores is not None:
                pairs = zip(ids, data.scores[name])
                console.print("     " + ", ".join(f"{i} ({s})" for i, s in pairs))
            elif ids:
                console.print("     " + ", ".join(ids))
    elif isinstance(data, HistoryLinks):
        console.print(f"WebEnv: {data.web_env}", style="dim")
        for name, key in data.query_keys.items():
            console.print(f"  {name}: query_key {key}")
    elif isinstance(data, LinkedDatabases):
        for name, record in data.linked_databases.items():
            menu = record.get("MenuTag", "")
            console.print(Text(name, style="bold cyan"), end="")
            console.print(f"  {menu}" if isinstance(menu, str) and menu else "")
    elif isinstance(data, LinkCheck):
        for record_id, has_links in data.check.items():
            mark = "[green]yes[/green]" if has_links else "[red]no[/red]"
            console.print(f"  {record_id}: {mark}")
    elif isinstance(data, Linkouts):
        for key, linkouts in data.linkouts.items():
            console.print(Text(f"{key} ({len(linkouts)})", style="bold cyan"))
            for linkout in linkouts:
                console.print(f"  {linkout.provider}", style="bold")
                console.print(f"     {linkout.url}", style="dim")
    elif isinstance(data, RawDocument):
        console.print(f"Unparsed <{data.document.tag}> document", style="dim")


def render_link_result(result: LinkResult, *, full: bool = False) -> None:
    """Print a LinkResult: its description, or every entry with ``full``."""
    _render_warnings(result.warnings)
    if full:
        _render_payload(result)
    else:
        console.print(describe(result), markup=False, highlight=False)


def render_global_counts(counts: DatabaseCountMap, *, term: str = "") -> None:
    if not counts:
        console.print("[yellow]No databases reported.[/yellow]")
        return

    header = f"Hits in {len(counts)} databases"
    if term:
        header += f" for '{term}'"
    console.print(header)
    console.print()
    console.print(describe_counts(counts), markup=False, highlight=False)

"""CLI entry point for the entrez tool."""

from __future__ import annotations

import logging
from typing import Optional

import click
from rich.console import Console

from entrez.models import LinkMode

console = Console()


@click.group()
@click.version_option(package_name="entrez-link")
@click.option("--verbose", "-v", is_flag=True, help="Log requests and retries.")
def cli(verbose: bool):
    """entrez - Find linked records and hit counts in NCBI Entrez databases."""
    if verbose:
        from rich.logging import RichHandler

        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


# ---------------------------------------------------------------------------
# entrez env
# ---------------------------------------------------------------------------


@cli.group(invoke_without_command=True)
@click.pass_context
def env(ctx):
    """Show or configure NCBI settings.

    Run without arguments to see the settings requests will use.
    Use `entrez env set KEY value` to save a setting to ~/.entrez/.env.
    """
    if ctx.invoked_subcommand is not None:
        return

    from entrez.config import PERSISTENT_ENV, current_settings

    settings = current_settings()
    width = max(len(key) for key, _ in settings)
    for key, value in settings:
        console.print(f"  {key.ljust(width)}  {value}", highlight=False)
    console.print()
    console.print(f"Config file: {PERSISTENT_ENV}", style="dim")


@env.command("set")
@click.argument("key")
@click.argument("value")
def env_set(key: str, value: str):
    """Save a setting to ~/.entrez/.env.

    KEY: one of NCBI_API_KEY, NCBI_EMAIL, NCBI_TOOL, ENTREZ_TIMEOUT,
    ENTREZ_REQUEST_DELAY, ENTREZ_BASE_URL
    VALUE: the value to store
    """
    from entrez.config import VALID_KEYS, save_key

    key = key.upper()
    if key not in VALID_KEYS:
        console.print(f"[red]Unknown key: {key}[/red]")
        console.print(f"Valid keys: {', '.join(sorted(VALID_KEYS))}")
        raise SystemExit(1)

    path = save_key(key, value)
    console.print(f"Saved {key} to {path}")


# ---------------------------------------------------------------------------
# entrez link
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("ids", nargs=-1)
@click.option("--dbfrom", required=True, help="Database the IDs come from (e.g., 'pubmed').")
@click.option("--db", default="", help="Database to find links in (default: all).")
@click.option(
    "--cmd",
    "-c",
    default=LinkMode.NEIGHBOR.value,
    help=f"Link command: {', '.join(m.value for m in LinkMode)}.",
)
@click.option("--web-env", default=None, help="WebEnv of a previous search, used instead of IDs.")
@click.option("--query-key", default=None, help="Query key within --web-env.")
@click.option("--by-id", is_flag=True, help="Link each ID separately.")
@click.option("--full", is_flag=True, help="Print every entry instead of a summary.")
def link(
    ids: tuple[str, ...],
    dbfrom: str,
    db: str,
    cmd: str,
    web_env: Optional[str],
    query_key: Optional[str],
    by_id: bool,
    full: bool,
):
    """Find records linked to IDs in another database.

    IDS: one or more record identifiers in --dbfrom
    """
    from entrez.link import entrez_link
    from entrez.renderer import render_link_result

    try:
        result = entrez_link(
            dbfrom=dbfrom,
            db=db,
            cmd=cmd,
            ids=list(ids) or None,
            web_env=web_env,
            query_key=query_key,
            by_id=by_id,
        )
        render_link_result(result, full=full)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise SystemExit(1)


# ---------------------------------------------------------------------------
# entrez global
# ---------------------------------------------------------------------------


@cli.command("global")
@click.argument("term")
def global_query(term: str):
    """Count hits for a term in every Entrez database.

    TERM: the search term
    """
    from entrez.global_query import entrez_global_query
    from entrez.renderer import render_global_counts

    try:
        counts = entrez_global_query(term)
        render_global_counts(counts, term=term)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise SystemExit(1)

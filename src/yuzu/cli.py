"""yuzu CLI — plaintext key-value store backed by a single delimited file.

Commands:
    yuzu init                  create yuzu.toml + an empty database file
    yuzu get KEY               print the value for KEY
    yuzu set KEY VALUE         set KEY (rewrites the file)
    yuzu rm KEY                remove KEY (rewrites the file)
    yuzu list                  dump all rows
    yuzu check                 parse the file and report problems
    yuzu status                show config and database stats
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import click

from yuzu.config import ConfigError, YuzuConfig, init_config, load_config
from yuzu.store import ParseError, Store, StoreError

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@dataclass
class _Overrides:
    file: str | None = None
    delimiter: str | None = None


def _load_cfg(ctx: click.Context) -> YuzuConfig:
    overrides: _Overrides = ctx.find_object(_Overrides) or _Overrides()
    try:
        cfg = load_config()
    except Exception as exc:
        raise click.ClickException(str(exc)) from exc
    if overrides.file is not None:
        cfg.file = str(Path(overrides.file).resolve())
    if overrides.delimiter is not None:
        cfg.delimiter = overrides.delimiter
    return cfg


def _open_store(ctx: click.Context) -> Store:
    cfg = _load_cfg(ctx)
    try:
        return Store.open(cfg.db_path, cfg.delimiter)
    except ParseError as exc:
        raise click.ClickException(f"{cfg.db_path}:{exc.lineno}: {exc}") from exc
    except StoreError as exc:
        raise click.ClickException(str(exc)) from exc


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="yuzu")
@click.option("--file", "-f", "file", default=None, help="Database file (overrides yuzu.toml)")
@click.option("--delimiter", "-d", default=None, help="Key/value delimiter (overrides yuzu.toml)")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx: click.Context, file: str | None, delimiter: str | None, verbose: bool) -> None:
    """yuzu — plaintext key-value store."""
    if delimiter == "":
        raise click.BadParameter("must not be empty", param_hint="--delimiter")
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(message)s")
    ctx.obj = _Overrides(file=file, delimiter=delimiter)


# ---------------------------------------------------------------------------
# yuzu init
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--dir", "root", default=".", show_default=True, help="Project root")
@click.pass_context
def init(ctx: click.Context, root: str) -> None:
    """Create yuzu.toml and an empty database file in the current project."""
    overrides: _Overrides = ctx.find_object(_Overrides) or _Overrides()
    root_path = Path(root).resolve()
    try:
        config_path = init_config(root_path, file=overrides.file, delimiter=overrides.delimiter)
        click.echo(f"Created {config_path}")
    except FileExistsError:
        click.echo("yuzu.toml already exists — skipping init")
        if overrides.file is not None or overrides.delimiter is not None:
            click.echo("Warning: --file/--delimiter not applied to the existing yuzu.toml", err=True)

    try:
        cfg = load_config(root_path)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    if cfg.ensure_db():
        click.echo(f"Created {cfg.db_path}")
    click.echo(f"Database : {cfg.db_path}")
    click.echo(f"Delimiter: {cfg.delimiter!r}")


# ---------------------------------------------------------------------------
# yuzu get / set / rm
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("key")
@click.pass_context
def get(ctx: click.Context, key: str) -> None:
    """Print the value stored under KEY."""
    store = _open_store(ctx)
    value = store.get(key)
    if value is None:
        raise click.ClickException(f"Key not found: {key}")
    click.echo(value)


def _check_row(store: Store, key: str, value: str) -> None:
    """Refuse rows that would make the file unloadable."""
    for label, text in (("key", key), ("value", value)):
        if store.delimiter in text:
            raise click.ClickException(f"{label} contains the delimiter {store.delimiter!r}")
        if "\n" in text or "\r" in text:
            raise click.ClickException(f"{label} contains a line break")


@cli.command("set")
@click.argument("key")
@click.argument("value")
@click.option("--show-previous", is_flag=True, help="Print the value that was replaced")
@click.pass_context
def set_cmd(ctx: click.Context, key: str, value: str, show_previous: bool) -> None:
    """Set KEY to VALUE and rewrite the database file."""
    store = _open_store(ctx)
    _check_row(store, key, value)
    try:
        previous = store.set(key, value)
    except StoreError as exc:
        raise click.ClickException(str(exc)) from exc
    if show_previous:
        click.echo(previous if previous is not None else "(none)")
    else:
        click.echo("OK")


@cli.command()
@click.argument("key")
@click.pass_context
def rm(ctx: click.Context, key: str) -> None:
    """Remove KEY and rewrite the database file."""
    store = _open_store(ctx)
    if key not in store:
        raise click.ClickException(f"Key not found: {key}")
    try:
        removed = store.remove(key)
    except StoreError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(removed)


# ---------------------------------------------------------------------------
# yuzu list / check / status
# ---------------------------------------------------------------------------


@cli.command("list")
@click.option("--sort/--no-sort", default=True, show_default=True, help="Sort rows by key")
@click.pass_context
def list_cmd(ctx: click.Context, sort: bool) -> None:
    """Print every row as key<delimiter>value."""
    store = _open_store(ctx)
    rows = sorted(store.items()) if sort else store.items()
    for key, value in rows:
        click.echo(f"{key}{store.delimiter}{value}")


@cli.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Parse the database file and report the first bad line, if any."""
    store = _open_store(ctx)
    click.echo(f"OK: {len(store)} rows in {store.path}")


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show config, database path and row count."""
    from rich.console import Console
    from rich.table import Table

    cfg = _load_cfg(ctx)
    console = Console()

    table = Table(title=f"yuzu — {cfg.root.name}", show_header=True, header_style="bold")
    table.add_column("Metric", style="dim", no_wrap=True)
    table.add_column("Value", justify="right")

    from importlib.metadata import version as _pkg_version
    try:
        _ver = _pkg_version("yuzu")
    except Exception:
        _ver = "unknown"
    table.add_row("Version", _ver)
    table.add_row("Config", str(cfg.config_path) if cfg.config_path.exists() else "[dim]defaults[/dim]")
    table.add_row("Database", str(cfg.db_path))
    table.add_row("Delimiter", repr(cfg.delimiter))

    if not cfg.db_path.exists():
        table.add_row("Rows", "[red]missing — run `yuzu init`[/red]")
    else:
        table.add_row("Size", f"{cfg.db_path.stat().st_size} B")
        try:
            store = Store.open(cfg.db_path, cfg.delimiter)
            table.add_row("Rows", str(len(store)))
        except ParseError as exc:
            table.add_row("Rows", f"[red]parse error on line {exc.lineno}[/red]")
        except StoreError as exc:
            table.add_row("Rows", f"[red]{exc}[/red]")

    console.print(table)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    cli(standalone_mode=True)


if __name__ == "__main__":
    main()

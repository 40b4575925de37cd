"""CLI interface for fieldkit."""

from __future__ import annotations

import logging
from enum import StrEnum
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from fieldkit.config import FieldkitConfig, load_config, merge_cli_overrides
from fieldkit.content.models import ContentNode
from fieldkit.content.store import ContentStore
from fieldkit.diagnostics import CollectingSink
from fieldkit.errors import StoreError
from fieldkit.fields.resolver import FieldResolver
from fieldkit.publishing.models import PublishMode
from fieldkit.publishing.replicator import PublishReplicator

app = typer.Typer(
    name="fieldkit",
    help="Resolve typed content fields and publish content nodes.",
)

console = Console()
err_console = Console(stderr=True)


class ReadAs(StrEnum):
    """How ``fieldkit get`` interprets a field."""

    TEXT = "text"
    INT = "int"
    DOUBLE = "double"
    BOOL = "bool"
    DATE = "date"
    URL = "url"
    LINK = "link"
    IMAGE = "image"
    MEDIA = "media"
    IDS = "ids"
    REFS = "refs"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from fieldkit import __version__

        console.print(f"fieldkit {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to a .fieldkit.toml file."),
    ] = None,
    store_dir: Annotated[
        Optional[Path],
        typer.Option("--store-dir", help="Directory holding <store>.json files."),
    ] = None,
    server_url: Annotated[
        Optional[str],
        typer.Option("--server-url", help="Server prefix for canonical node URLs."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log debug output."),
    ] = False,
) -> None:
    """fieldkit - typed content fields, link resolution, multi-locale publishing."""
    _configure_logging(verbose)
    config = load_config(config_path)
    ctx.obj = merge_cli_overrides(
        config,
        store_dir=str(store_dir) if store_dir is not None else None,
        server_url=server_url,
    )


def _open_store(config: FieldkitConfig, name: str) -> ContentStore:
    try:
        return config.open_store(name)
    except StoreError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc


def _find_node(store: ContentStore, node: str, locale: str | None) -> ContentNode:
    found = store.lookup(node, locale)
    if found is None:
        console.print(f"[red]Node not found in {store.name}:[/red] {node}")
        raise typer.Exit(1)
    return found


def _read(
    resolver: FieldResolver,
    node: ContentNode,
    key: str,
    read_as: ReadAs,
    width: int | None,
    height: int | None,
) -> list[str]:
    """Read one field and render the result as output lines."""
    if read_as == ReadAs.TEXT:
        return [resolver.get_value(node, key)]
    if read_as == ReadAs.INT:
        return [str(resolver.get_integer(node, key))]
    if read_as == ReadAs.DOUBLE:
        return [repr(resolver.get_double(node, key))]
    if read_as == ReadAs.BOOL:
        return [str(resolver.get_checked_boolean(node, key)).lower()]
    if read_as == ReadAs.DATE:
        value = resolver.get_temporal(node, key)
        return [value.isoformat() if value is not None else ""]
    if read_as == ReadAs.URL:
        return [resolver.get_url(node, key)]
    if read_as == ReadAs.LINK:
        return [resolver.get_link_url(node, key)]
    if read_as == ReadAs.IMAGE:
        return [resolver.get_image_url(node, key, width=width, height=height)]
    if read_as == ReadAs.MEDIA:
        return [resolver.get_media_file_url(node, key)]
    if read_as == ReadAs.IDS:
        return resolver.get_referenced_ids(node, key)
    return [ref.path for ref in resolver.get_referenced_nodes(node, key)]


@app.command()
def get(
    ctx: typer.Context,
    node: Annotated[str, typer.Argument(help="Node id or full path.")],
    key: Annotated[str, typer.Argument(help="Field name.")],
    read_as: Annotated[
        ReadAs,
        typer.Option("--as", "-a", help="How to interpret the field."),
    ] = ReadAs.TEXT,
    store: Annotated[
        Optional[str],
        typer.Option("--store", "-s", help="Store name. Defaults to the source store."),
    ] = None,
    locale: Annotated[
        Optional[str],
        typer.Option("--locale", "-l", help="Locale of the node version to read."),
    ] = None,
    width: Annotated[Optional[int], typer.Option("--width", help="Image width.")] = None,
    height: Annotated[Optional[int], typer.Option("--height", help="Image height.")] = None,
) -> None:
    """Read a field from a node."""
    config: FieldkitConfig = ctx.obj
    content_store = _open_store(config, store or config.stores.source)
    target = _find_node(content_store, node, locale)

    sink = CollectingSink()
    resolver = FieldResolver(
        content_store,
        sink=sink,
        links=config.to_link_provider(),
        media=config.to_media_provider(),
    )
    for line in _read(resolver, target, key, read_as, width, height):
        console.print(line, markup=False, highlight=False, soft_wrap=True)
    for diagnostic in sink.records:
        err_console.print(
            f"{diagnostic.level.value}: {diagnostic.message}",
            style="yellow",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )


@app.command()
def active(
    ctx: typer.Context,
    node: Annotated[str, typer.Argument(help="Node id or full path.")],
    from_key: Annotated[str, typer.Argument(help="Field holding the window start.")],
    to_key: Annotated[str, typer.Argument(help="Field holding the window end.")],
    store: Annotated[
        Optional[str],
        typer.Option("--store", "-s", help="Store name. Defaults to the source store."),
    ] = None,
) -> None:
    """Report whether a node is inside its activity window."""
    config: FieldkitConfig = ctx.obj
    content_store = _open_store(config, store or config.stores.source)
    target = _find_node(content_store, node, None)
    resolver = FieldResolver(content_store, sink=CollectingSink())
    is_active = resolver.is_active(target, from_key, to_key)
    console.print("active" if is_active else "inactive")


@app.command()
def publish(
    ctx: typer.Context,
    node: Annotated[str, typer.Argument(help="Node id or full path in the source store.")],
    mode: Annotated[
        Optional[PublishMode],
        typer.Option("--mode", "-m", help="single-item or subtree."),
    ] = None,
    target: Annotated[
        Optional[list[str]],
        typer.Option("--target", "-t", help="Target store (repeatable). Defaults to config."),
    ] = None,
) -> None:
    """Publish a node into every target store, in every source locale."""
    config: FieldkitConfig = merge_cli_overrides(ctx.obj, mode=mode)
    source = _open_store(config, config.stores.source)
    try:
        replicator = PublishReplicator(config.to_replicator_config(target or None, source))
    except StoreError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc

    root = _find_node(source, node, None)
    outcomes = replicator.publish(root, config.publishing.mode)

    if not outcomes:
        console.print("[yellow]No target stores configured, nothing published.[/yellow]")
        return

    table = Table(title=f"Publish {root.path} ({config.publishing.mode})")
    table.add_column("Target")
    table.add_column("Locale")
    table.add_column("Path")
    table.add_column("Status")
    published = skipped = 0
    for outcome in outcomes:
        for record in outcome.published:
            table.add_row(outcome.target, record.locale, record.path, "[green]published[/green]")
        for record in outcome.skipped:
            table.add_row(outcome.target, record.locale, record.path, "[dim]up to date[/dim]")
        published += len(outcome.published)
        skipped += len(outcome.skipped)
    console.print(table)
    console.print(f"Published {published}, skipped {skipped} up to date.")


if __name__ == "__main__":
    app()

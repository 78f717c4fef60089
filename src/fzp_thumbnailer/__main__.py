"""CLI entry point for fuzzpaint-thumbnailer."""

import logging
import sys
from pathlib import Path

import click

from .adapters.desktop import (
    install_desktop_files,
    uninstall_desktop_files,
    update_mime_database,
)
from .adapters.fzp import FzpDocumentAdapter, iter_chunks, read_thumbnail_chunk
from .adapters.image import PillowRenderer, QoiDecoder, read_qoi_header
from .adapters.storage import (
    FilesystemStorage,
    ThumbnailFlavor,
    resolve_source,
    uri_for_path,
)
from .config import Settings, load_settings
from .domain.errors import ThumbnailError
from .domain.services import ThumbnailService

logger = logging.getLogger(__name__)

DOCUMENT_SUFFIX = ".fzp"


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_service(settings: Settings) -> ThumbnailService:
    """Wire up adapters from settings."""
    return ThumbnailService(
        document=FzpDocumentAdapter(),
        decoder=QoiDecoder(max_dimension=settings.limits.max_input_dimension),
        renderer=PillowRenderer(
            software=settings.output.software,
            compress_level=settings.output.compress_level,
            upscale=settings.output.upscale,
        ),
        storage=FilesystemStorage(settings.cache.directory),
        record_failures=settings.cache.record_failures,
    )


def validate_size(size: int, max_size: int) -> int:
    """Check a requested thumbnail size against the configured limit."""
    if size <= 0:
        raise click.BadParameter("SIZE must be a positive integer")
    if size > max_size:
        raise click.BadParameter(f"SIZE larger than reasonable (max {max_size})")
    return size


def collect_documents(path: Path, recursive: bool) -> list[Path]:
    """Collect fzp documents from path (file or directory)."""
    if path.is_file():
        return [path] if path.suffix.lower() == DOCUMENT_SUFFIX else []
    candidates = path.glob("**/*" if recursive else "*")
    return sorted(
        p for p in candidates if p.is_file() and p.suffix.lower() == DOCUMENT_SUFFIX
    )


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option("-c", "--config", type=click.Path(exists=True), help="Config file path")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config: str | None) -> None:
    """Fuzzpaint thumbnailer - previews for .fzp documents."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = Path(config) if config else None


@cli.command()
@click.argument("in_path")
@click.argument("size", type=int)
@click.argument("out_path", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("in_uri", required=False)
@click.pass_context
def thumbnail(
    ctx: click.Context, in_path: str, size: int, out_path: Path, in_uri: str | None
) -> None:
    """Write a PNG thumbnail of IN_PATH fitting SIZE to OUT_PATH.

    Matches the registered exec pattern: %i %s %o %u.
    """
    # Run by desktop daemons: stay quiet unless asked
    if not ctx.obj["verbose"]:
        logging.getLogger().setLevel(logging.WARNING)

    settings = load_settings(ctx.obj["config_path"])
    validate_size(size, settings.limits.max_size)

    try:
        source, uri = resolve_source(in_path)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="IN_PATH") from e

    result = build_service(settings).create(
        source, size, output=out_path, uri=in_uri or uri
    )
    if not result.success:
        click.echo(f"Error: {'; '.join(result.errors)}", err=True)
        sys.exit(1)


@cli.command()
@click.argument(
    "paths", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path)
)
@click.option(
    "--flavor",
    type=click.Choice([f.value for f in ThumbnailFlavor]),
    default=ThumbnailFlavor.NORMAL.value,
    show_default=True,
    help="Thumbnail size class",
)
@click.option("--recursive/--no-recursive", default=True, help="Search recursively")
@click.option("--force", is_flag=True, help="Regenerate up-to-date thumbnails")
@click.option("--dry-run", is_flag=True, help="Show what would be generated")
@click.pass_context
def generate(
    ctx: click.Context,
    paths: tuple[Path, ...],
    flavor: str,
    recursive: bool,
    force: bool,
    dry_run: bool,
) -> None:
    """Fill the thumbnail cache for documents."""
    settings = load_settings(ctx.obj["config_path"])
    size_class = ThumbnailFlavor(flavor)
    storage = FilesystemStorage(settings.cache.directory)

    documents = [doc for path in paths for doc in collect_documents(path, recursive)]

    # Skip thumbnails whose Thumb::MTime matches the document
    pending = []
    for doc in documents:
        uri = uri_for_path(doc)
        dest = storage.flavor_path(uri, size_class)
        if not force and storage.is_current(dest, int(doc.stat().st_mtime)):
            logger.debug(f"Up to date: {doc}")
            continue
        pending.append((doc, uri, dest))

    if not pending:
        click.echo("No thumbnails to generate")
        return

    if dry_run:
        click.echo(f"Would generate {len(pending)} thumbnails:")
        for source, _, dest in pending:
            click.echo(f"  {source} -> {dest}")
        return

    service = build_service(settings)
    success_count = 0
    error_count = 0

    for source, uri, dest in pending:
        result = service.create(source, size_class.pixels, output=dest, uri=uri)
        if result.success:
            success_count += 1
            click.echo(f"✓ {source.name}: {result.width}x{result.height}")
        else:
            error_count += 1
            click.echo(f"✗ {source.name}: {result.errors}", err=True)

    click.echo(f"\nGenerated: {success_count} success, {error_count} errors")
    if error_count:
        sys.exit(1)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def inspect(file: Path) -> None:
    """Show the chunk layout and preview header of a document."""
    try:
        with open(file, "rb") as f:
            for chunk in iter_chunks(f):
                click.echo(f"{chunk.name!r:8} offset={chunk.offset} size={chunk.size}")

            f.seek(0)
            header = read_qoi_header(read_thumbnail_chunk(f))
    except ThumbnailError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(
        f"preview: {header.width}x{header.height}, {header.channels} channels, "
        f"colorspace={header.colorspace.name.lower()}"
    )


@cli.command()
@click.pass_context
def install(ctx: click.Context) -> None:
    """Register the thumbnailer with the desktop."""
    settings = load_settings(ctx.obj["config_path"])
    data_home = settings.desktop.data_home

    for path in install_desktop_files(data_home):
        click.echo(f"Installed: {path}")

    if update_mime_database(data_home):
        click.echo("MIME database updated")


@cli.command()
@click.pass_context
def uninstall(ctx: click.Context) -> None:
    """Unregister the thumbnailer from the desktop."""
    settings = load_settings(ctx.obj["config_path"])
    data_home = settings.desktop.data_home

    removed = uninstall_desktop_files(data_home)
    if not removed:
        click.echo("Thumbnailer not installed")
        return

    for path in removed:
        click.echo(f"Removed: {path}")
    update_mime_database(data_home)


if __name__ == "__main__":
    cli()

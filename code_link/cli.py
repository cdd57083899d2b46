"""Click CLI with link, scan, order, graph and serve subcommands."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from code_link import __version__
from code_link.config import command_defaults, load_rc_file
from code_link.errors import LinkError
from code_link.models import DEFAULT_SKIP_DIRS, LinkConfig
from code_link.pipeline import build_collection, run_link, run_scan

_SOURCE_DIR = click.Path(exists=True, file_okay=False, path_type=Path)


def _extensions_option(func):
    return click.option(
        "--include-extension", "-x", "include_extensions", multiple=True,
        default=(".js",), show_default=True, help="File suffixes to scan",
    )(func)


def _skip_option(func):
    return click.option(
        "--skip-dir", "skip_dirs", multiple=True,
        default=tuple(DEFAULT_SKIP_DIRS), help="Directory glob patterns to skip",
    )(func)


def _plural(count: int, word: str) -> str:
    if count == 1:
        return f"{count} {word}"
    if word.endswith("y"):
        return f"{count} {word[:-1]}ies"
    return f"{count} {word}s"


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help="rc file to read defaults from (default: ./.codelinkrc)")
@click.option("--verbose", "-v", is_flag=True, help="Log progress details")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool):
    """code-link: Order annotated modules by their requirements and bundle them."""
    try:
        rc = load_rc_file(config_path)
    except LinkError as e:
        raise click.ClickException(str(e))

    verbose = verbose or bool(rc.verbose)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.default_map = command_defaults(rc)


def _load_collection(source_dir: Path, include_extensions, skip_dirs):
    config = LinkConfig(
        source_dir=source_dir,
        include_extensions=tuple(include_extensions),
        skip_dirs=list(skip_dirs),
    )
    try:
        return build_collection(run_scan(config))
    except LinkError as e:
        raise click.ClickException(str(e))


@cli.command()
@click.argument("source_dir", type=_SOURCE_DIR, default=".")
@click.option("-o", "--destination", type=click.Path(),
              default="out/combined.js", show_default=True, help="Output bundle path")
@click.option("--overwrite", is_flag=True, help="Replace existing output files")
@click.option("--strict", is_flag=True, help="Fail when required modules are not defined")
@click.option("--test", is_flag=True, help="Order everything but write nothing")
@click.option("--exportmap", "export_map", type=click.Path(path_type=Path),
              help="Write the dependency graph in Graphviz format")
@click.option("--manifest", is_flag=True, help="Write manifest.json next to the bundle")
@_extensions_option
@_skip_option
def link(
    source_dir: Path,
    destination: str,
    overwrite: bool,
    strict: bool,
    test: bool,
    export_map: Path | None,
    manifest: bool,
    include_extensions: tuple[str, ...],
    skip_dirs: tuple[str, ...],
):
    """Order the modules in SOURCE_DIR and write them as one bundle."""
    config = LinkConfig(
        source_dir=source_dir,
        destination=destination,
        include_extensions=tuple(include_extensions),
        skip_dirs=list(skip_dirs),
        overwrite=overwrite,
        strict=strict,
        test=test,
        export_map=Path(export_map) if export_map else None,
        manifest=manifest,
    )

    def progress(stage: str, current: int, total: int):
        if current == total:
            click.echo(f"  {stage}: done")

    click.echo(f"Linking {source_dir} -> {destination}\n")

    try:
        result = run_link(config, progress=progress)
    except LinkError as e:
        raise click.ClickException(str(e))

    stats = result.stats
    click.echo(
        f"\n{_plural(result.number_of_modules, 'module')} with "
        f"{_plural(result.number_of_dependencies, 'dependency')} "
        f"in {_plural(len(result.order), 'bucket')}."
    )
    if stats.orphan_modules:
        click.echo(click.style(
            "Undefined: " + ", ".join(m.name for m in stats.orphan_modules), fg="yellow",
        ))
    if stats.number_of_exports:
        click.echo(f"{_plural(stats.number_of_exports, 'export')}.")

    if test:
        click.echo("Test mode: nothing written.")
        return
    click.echo(f"Done! Created {_plural(len(result.files_created), 'file')}:")
    for f in result.files_created:
        click.echo(f"  {f}")


@cli.command()
@click.argument("source_dir", type=_SOURCE_DIR, default=".")
@_extensions_option
@_skip_option
def scan(source_dir: Path, include_extensions: tuple[str, ...], skip_dirs: tuple[str, ...]):
    """List the module declarations found in SOURCE_DIR."""
    config = LinkConfig(
        source_dir=source_dir,
        include_extensions=tuple(include_extensions),
        skip_dirs=list(skip_dirs),
    )
    declarations = run_scan(config)
    if not declarations:
        click.echo("No module declarations found.")
        return

    click.echo(f"\nFound {_plural(len(declarations), 'module')}:\n")
    by_file: dict[str, list] = {}
    for declaration in declarations:
        by_file.setdefault(declaration.source, []).append(declaration)

    for source, file_declarations in by_file.items():
        click.echo(click.style(source, fg="cyan"))
        for declaration in file_declarations:
            line = f"  {click.style(declaration.module_name, fg='green')}"
            if declaration.requires:
                line += f"  requires {', '.join(declaration.requires)}"
            click.echo(f"{line}  {click.style(f'L{declaration.line_number}', dim=True)}")
        click.echo()


@cli.command()
@click.argument("source_dir", type=_SOURCE_DIR, default=".")
@_extensions_option
@_skip_option
def order(source_dir: Path, include_extensions: tuple[str, ...], skip_dirs: tuple[str, ...]):
    """Print the build order of SOURCE_DIR, one bucket per component."""
    collection = _load_collection(source_dir, include_extensions, skip_dirs)
    try:
        buckets = collection.serialize()
    except LinkError as e:
        raise click.ClickException(str(e))

    for index, bucket in enumerate(buckets):
        click.echo(click.style(f"[{index}]", fg="cyan"))
        for module in bucket:
            source = module.source or click.style("(undefined)", fg="yellow")
            click.echo(f"  {module.name}  {source}")


@cli.command()
@click.argument("source_dir", type=_SOURCE_DIR, default=".")
@_extensions_option
@_skip_option
def graph(source_dir: Path, include_extensions: tuple[str, ...], skip_dirs: tuple[str, ...]):
    """Print the dependency graph of SOURCE_DIR in Graphviz format."""
    collection = _load_collection(source_dir, include_extensions, skip_dirs)
    click.echo(collection.to_dot())


@cli.command()
@click.option("--port", "-p", default=8421, help="Port number")
@click.option("--host", default="127.0.0.1", help="Host address")
@click.option("--open/--no-open", default=False, help="Open browser automatically")
def serve(port: int, host: str, open: bool):
    """Start the HTTP API."""
    try:
        import uvicorn
    except ImportError:
        raise click.ClickException(
            "uvicorn is required for the HTTP API. "
            "Install with: pip install 'code-link[web]'"
        )

    from code_link.web import create_app

    click.echo(f"Starting code-link API at http://{host}:{port}")

    if open:
        import webbrowser
        import threading
        threading.Timer(1.0, lambda: webbrowser.open(f"http://{host}:{port}/docs")).start()

    uvicorn.run(create_app(), host=host, port=port, log_level="info")


if __name__ == "__main__":
    cli()

"""Kalenuxer CLI entry point - assembles all commands."""
import logging
from pathlib import Path

import click

from . import __version__
from .build_cmd import backup, dev, prepare, release, upload
from .times_cmd import times


@click.group()
@click.version_option(version=__version__)
@click.option("--root", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Directory holding websites/ (default: current directory)")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
@click.pass_context
def cli(ctx, root, verbose):
    """Kalenuxer: incremental static-site builds."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    ctx.obj = root if root is not None else Path.cwd()


cli.add_command(prepare)
cli.add_command(release)
cli.add_command(upload)
cli.add_command(dev)
cli.add_command(backup)
cli.add_command(times)


if __name__ == "__main__":
    cli()

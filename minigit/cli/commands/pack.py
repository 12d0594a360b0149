"""Pack commands - bundle objects into one file and import them back."""

import click
from minigit.core.repository import Repository
from minigit.operations.packing import build_pack, import_pack
from minigit.cli.output import success, error


@click.command('pack-objects')
@click.argument('file', type=click.Path(dir_okay=False))
def pack_objects_cmd(file):
    """
    Write every stored object into a pack file.

    Examples:
        minigit pack-objects backup.mpk
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a minigit repository"))
        raise click.Abort()

    result = build_pack(repo, file)
    if not result.success:
        click.echo(error(f"pack-objects failed: {result.message}"))
        raise click.Abort()
    click.echo(success(result.message))


@click.command('unpack-objects')
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
def unpack_objects_cmd(file):
    """
    Import the objects of a pack file.

    The pack is verified as a whole before any object is written; objects
    already present are skipped.

    Examples:
        minigit unpack-objects backup.mpk
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a minigit repository"))
        raise click.Abort()

    result = import_pack(repo, file)
    if not result.success:
        click.echo(error(f"unpack-objects failed: {result.message}"))
        raise click.Abort()
    click.echo(success(result.message))

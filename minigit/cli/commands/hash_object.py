"""Plumbing commands that write objects: hash-object and write-tree."""

import click
from pathlib import Path
from minigit.core.errors import MinigitError
from minigit.core.objects import Blob
from minigit.core.repository import Repository
from minigit.operations.worktree import write_tree
from minigit.cli.output import error


@click.command('hash-object')
@click.option('-w', '--write', is_flag=True, help='Write the blob into the object store')
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
def hash_object_cmd(write, file):
    """
    Compute the blob hash of a file.

    Without -w this works outside a repository.

    Examples:
        minigit hash-object README.md
        minigit hash-object -w README.md
    """
    try:
        blob = Blob.from_file(Path(file))
    except OSError as e:
        click.echo(error(f"Cannot read {file}: {e}"))
        raise click.Abort()

    if not write:
        click.echo(blob.hash)
        return

    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a minigit repository"))
        raise click.Abort()

    try:
        click.echo(repo.objects.write(blob))
    except MinigitError as e:
        click.echo(error(f"hash-object failed: {e}"))
        raise click.Abort()


@click.command('write-tree')
def write_tree_cmd():
    """
    Snapshot the working directory as tree objects.

    Prints the root tree hash. The .minigit directory is never included.
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a minigit repository"))
        raise click.Abort()

    try:
        click.echo(write_tree(repo.objects, repo.work_tree))
    except MinigitError as e:
        click.echo(error(f"write-tree failed: {e}"))
        raise click.Abort()

"""Symbolic-ref command - read or repoint HEAD."""

import click
from minigit.core.errors import MinigitError
from minigit.core.refs import HEAD_FILE, HEADS_PREFIX
from minigit.core.repository import Repository
from minigit.cli.output import success, error


@click.command('symbolic-ref')
@click.argument('name')
@click.argument('ref', required=False)
def symbolic_ref_cmd(name, ref):
    """
    Read or set symbolic references.

    Only HEAD is supported. Setting HEAD does not touch the work tree.

    Examples:
        minigit symbolic-ref HEAD                   # Show what HEAD points to
        minigit symbolic-ref HEAD refs/heads/main   # Set HEAD to point to main
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a minigit repository"))
        raise click.Abort()

    if name != HEAD_FILE:
        click.echo(error("Only HEAD supported for now"))
        raise click.Abort()

    if ref:
        refname = ref if ref.startswith('refs/') else HEADS_PREFIX + ref
        try:
            repo.refs.set_head_symbolic(refname)
        except MinigitError as e:
            click.echo(error(f"Failed to set {name}: {e}"))
            raise click.Abort()
        click.echo(success(f"Set {name} to {refname}"))
        return

    head = repo.refs.read_head()
    if head is None:
        click.echo(error("HEAD does not exist"))
        raise click.Abort()
    if not head.symbolic:
        click.echo(error("HEAD is not a symbolic reference (detached HEAD)"))
        raise click.Abort()
    click.echo(head.target)

"""Checkout command - switch branches or restore a snapshot."""

import click
from minigit.core.errors import MinigitError
from minigit.core.repository import Repository
from minigit.operations.worktree import checkout_head, switch_to
from minigit.cli.output import success, error, warning


@click.command('checkout')
@click.argument('target', required=False)
def checkout_cmd(target):
    """
    Switch branches or restore working tree files.

    TARGET may be a branch name, a commit hash (detaches HEAD) or a tree
    hash (rewrites files only). Without TARGET the work tree is rebuilt
    from HEAD.

    Uncommitted changes in the work tree are overwritten.

    Examples:
        minigit checkout                # Restore files from HEAD
        minigit checkout feature        # Switch to feature branch
        minigit checkout <commit>       # Detached HEAD at commit
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a minigit repository"))
        raise click.Abort()

    try:
        if not target:
            index = checkout_head(repo)
            click.echo(success(f"Restored {len(index)} file(s) from HEAD"))
            return
        checked_out = switch_to(repo, target)
    except MinigitError as e:
        click.echo(error(f"checkout failed: {e}"))
        raise click.Abort()

    branch = repo.refs.get_current_branch()
    head = repo.refs.read_head()
    if head is not None and not head.symbolic:
        click.echo(warning(f"HEAD is now detached at {checked_out[:7]}"))
    elif branch and checked_out == repo.refs.resolve_head():
        click.echo(success(f"Switched to branch '{branch}'"))
    else:
        click.echo(success(f"Checked out {checked_out[:7]}"))

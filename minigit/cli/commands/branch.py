"""Branch command - list and create branches."""

import click
from minigit.core.errors import MinigitError
from minigit.core.repository import Repository
from minigit.cli.output import success, error, info
from colorama import Fore, Style


@click.command('branch')
@click.argument('name', required=False)
@click.argument('start_point', required=False)
def branch_cmd(name, start_point):
    """
    List or create branches.

    Without NAME, lists branches and marks the current one. With NAME,
    creates a branch at START_POINT (HEAD by default) without switching.

    Examples:
        minigit branch                  # List branches
        minigit branch feature          # Create 'feature' at HEAD
        minigit branch hotfix main      # Create 'hotfix' at main
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a minigit repository"))
        raise click.Abort()

    if not name:
        current = repo.refs.get_current_branch()
        branches = repo.refs.list_branches()
        if not branches:
            click.echo(info("No branches yet"))
            return
        for branch_name, commit_hash in branches:
            if branch_name == current:
                click.echo(f"* {Fore.GREEN}{branch_name}{Style.RESET_ALL} {commit_hash[:7]}")
            else:
                click.echo(f"  {branch_name} {commit_hash[:7]}")
        return

    target = start_point or 'HEAD'
    commit_hash = repo.refs.resolve_reference(target)
    if not commit_hash:
        click.echo(error(f"Not a valid start point: {target}"))
        raise click.Abort()

    try:
        repo.objects.read_commit(commit_hash)
        repo.refs.create_branch(name, commit_hash)
    except MinigitError as e:
        click.echo(error(f"Cannot create branch: {e}"))
        raise click.Abort()

    click.echo(success(f"Created branch '{name}' at {commit_hash[:7]}"))

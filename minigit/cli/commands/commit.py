"""Commit command - create a commit from staged changes."""

import click
from minigit.core.repository import Repository
from minigit.operations.commit import commit_index
from minigit.cli.output import success, error, info


@click.command('commit')
@click.option('-m', '--message', required=True, help='Commit message')
@click.option('--author', help='Author identity (format: "Name <email> <epoch> <tz>")')
def commit_cmd(message, author):
    """
    Record changes to the repository.

    Creates a commit from the staged files in the index. The author and
    committer come from GIT_AUTHOR_* / GIT_COMMITTER_* environment
    variables, then the user section of the config.

    Examples:
        minigit commit -m "Initial commit"
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a minigit repository"))
        raise click.Abort()

    result = commit_index(repo, message, author=author)
    if not result.success:
        click.echo(error(f"Failed to create commit: {result.message}"))
        raise click.Abort()

    click.echo(success(f"Created commit {result.commit_hash[:7]}"))
    if result.parents:
        click.echo(info(f"Parent: {result.parents[0][:7]}"))
    else:
        click.echo(info("(root commit)"))
    click.echo(info(f"Tree: {result.tree_hash[:7]}"))

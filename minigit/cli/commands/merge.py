"""Merge command for minigit."""

import click
from minigit.core.repository import Repository
from minigit.operations.merge import MergeEngine, STRATEGIES
from minigit.cli.output import success, error, warning, info


@click.command('merge')
@click.argument('branch')
@click.option('--no-ff', is_flag=True, help='Create a merge commit even if fast-forward is possible')
@click.option('--ff-only', is_flag=True, help='Refuse to merge unless fast-forward is possible')
@click.option('-s', '--strategy', type=click.Choice(STRATEGIES),
              help='Resolve every conflict by preferring one side')
@click.option('-m', '--message', help='Merge commit message')
def merge_cmd(branch, no_ff, ff_only, strategy, message):
    """
    Merge a branch into the current branch.

    BRANCH is the name of the branch (or a commit hash) to merge into HEAD.
    Conflicting paths are reported and nothing is committed. The work
    tree must be clean, since the merge result replaces its files.

    Examples:
        minigit merge feature                   # Merge feature into current branch
        minigit merge feature --no-ff           # Always create a merge commit
        minigit merge feature --ff-only         # Only fast-forward
        minigit merge feature --strategy=ours   # Conflicts: keep our version
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a minigit repository"))
        raise click.Abort()

    if no_ff and ff_only:
        click.echo(error("--no-ff and --ff-only cannot be used together"))
        raise click.Abort()

    current_branch = repo.refs.get_current_branch() or 'HEAD'
    click.echo(info(f"Merging '{branch}' into '{current_branch}'..."))
    if strategy:
        click.echo(info(f"Auto-resolving conflicts with '{strategy}' strategy"))

    engine = MergeEngine(repo)
    result = engine.merge(
        branch,
        allow_fast_forward=not no_ff,
        fast_forward_only=ff_only,
        strategy=strategy,
        message=message
    )

    if result.conflicts:
        click.echo(error(f"Conflicts detected in {len(result.conflicts)} file(s):"))
        for path in result.conflicts:
            click.echo(error(f"  CONFLICT: {path}"))
        click.echo(warning("Automatic merge failed; nothing was committed."))
        click.echo(info(f"Retry with --strategy={'|'.join(STRATEGIES)} to pick a side"))
        raise SystemExit(1)

    if not result.success:
        click.echo(error(f"Merge failed: {result.message}"))
        raise click.Abort()

    if result.is_fast_forward:
        click.echo(success(f"Fast-forward merge to {result.commit_hash[:7]}"))
    elif result.merged_tree_hash:
        click.echo(success(f"Merge commit created: {result.commit_hash[:7]}"))
        if result.base_hash:
            click.echo(info(f"Merge base: {result.base_hash[:7]}"))
    else:
        click.echo(success(result.message))

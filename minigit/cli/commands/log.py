"""Log command - show commit history."""

import click
from datetime import datetime, timezone
from minigit.core.errors import MinigitError
from minigit.core.repository import Repository
from minigit.operations.history import walk_history
from minigit.cli.output import error, info
from colorama import Fore, Style


def split_identity(identity):
    """Split ``Name <email> <epoch> <tz>`` into (who, epoch, tz)."""
    who, _, rest = identity.rpartition('> ')
    parts = rest.split()
    if not who or len(parts) != 2:
        return identity, None, None
    return who + '>', parts[0], parts[1]


def format_timestamp(timestamp, tz):
    """Format Unix timestamp to readable date."""
    try:
        dt = datetime.fromtimestamp(int(timestamp), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError):
        return "Unknown date"
    return f"{dt.strftime('%a %b %d %H:%M:%S %Y')} {tz}"


@click.command('log')
@click.option('-n', '--max-count', type=int, help='Limit number of commits to show')
@click.option('--oneline', is_flag=True, help='Show each commit on a single line')
@click.argument('start', required=False, default='HEAD')
def log_cmd(max_count, oneline, start):
    """
    Show commit history.

    Walks parents breadth-first from START (HEAD by default).

    Examples:
        minigit log                  # Show all commits
        minigit log -n 5             # Show last 5 commits
        minigit log --oneline feature
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a minigit repository"))
        raise click.Abort()

    start_hash = repo.refs.resolve_reference(start)
    if not start_hash:
        if start == 'HEAD':
            click.echo(info("No commits yet"))
            return
        click.echo(error(f"Unknown revision: {start}"))
        raise click.Abort()

    try:
        history = walk_history(repo.objects, start_hash, max_count)
    except MinigitError as e:
        click.echo(error(f"log failed: {e}"))
        raise click.Abort()

    for commit_hash, commit in history:
        summary = commit.message.splitlines()[0] if commit.message else ''
        if oneline:
            click.echo(f"{Fore.YELLOW}{commit_hash[:7]}{Style.RESET_ALL} {summary}")
            continue

        click.echo(f"{Fore.YELLOW}commit {commit_hash}{Style.RESET_ALL}")
        if len(commit.parents) > 1:
            click.echo(f"Merge: {' '.join(p[:7] for p in commit.parents)}")
        who, timestamp, tz = split_identity(commit.author)
        click.echo(f"Author: {who}")
        if timestamp is not None:
            click.echo(f"Date:   {format_timestamp(timestamp, tz)}")
        click.echo()
        for line in commit.message.rstrip('\n').splitlines():
            click.echo(f"    {line}")
        click.echo()

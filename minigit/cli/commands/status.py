"""Status command - show working tree status."""

import click
from minigit.core.errors import MinigitError
from minigit.core.repository import Repository
from minigit.operations.worktree import status
from minigit.cli.output import success, error, info
from colorama import Fore, Style


@click.command('status')
def status_cmd():
    """
    Show the working tree status.

    Displays:
    - Changes staged for commit (index vs HEAD)
    - Changes not staged for commit (work tree vs index)
    - Untracked files (not in the index)

    Examples:
        minigit status
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a minigit repository"))
        raise click.Abort()

    try:
        report = status(repo)
    except MinigitError as e:
        click.echo(error(f"status failed: {e}"))
        raise click.Abort()

    if report.branch:
        click.echo(f"On branch {Fore.CYAN}{report.branch}{Style.RESET_ALL}")
    elif report.head:
        click.echo(f"{Fore.YELLOW}HEAD detached at {report.head[:7]}{Style.RESET_ALL}")
    if not report.head:
        click.echo("No commits yet")
    click.echo()

    if report.has_staged:
        click.echo(Fore.GREEN + "Changes to be committed:" + Style.RESET_ALL)
        for path in report.staged_new:
            click.echo(f"  {Fore.GREEN}new file:   {path}{Style.RESET_ALL}")
        for path in report.staged_modified:
            click.echo(f"  {Fore.GREEN}modified:   {path}{Style.RESET_ALL}")
        for path in report.staged_deleted:
            click.echo(f"  {Fore.GREEN}deleted:    {path}{Style.RESET_ALL}")
        click.echo()

    if report.has_unstaged:
        click.echo(Fore.YELLOW + "Changes not staged for commit:" + Style.RESET_ALL)
        click.echo(info("  (use \"minigit add <file>...\" to update what will be committed)"))
        for path in report.unstaged_modified:
            click.echo(f"  {Fore.YELLOW}modified:   {path}{Style.RESET_ALL}")
        for path in report.unstaged_deleted:
            click.echo(f"  {Fore.YELLOW}deleted:    {path}{Style.RESET_ALL}")
        click.echo()

    if report.untracked:
        click.echo(Fore.RED + "Untracked files:" + Style.RESET_ALL)
        for path in report.untracked:
            click.echo(f"  {Fore.RED}{path}{Style.RESET_ALL}")
        click.echo()

    if report.clean:
        click.echo(success("Nothing to commit, working tree clean"))

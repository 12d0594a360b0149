"""Initialize a new minigit repository."""

import click
from pathlib import Path
from minigit.core.errors import MinigitError
from minigit.core.repository import DEFAULT_BRANCH, Repository
from minigit.cli.output import success, error, info


@click.command('init')
@click.argument('path', default='.')
@click.option('-b', '--initial-branch', default=DEFAULT_BRANCH, show_default=True,
              help='Name of the branch HEAD starts on')
def init_cmd(path, initial_branch):
    """
    Initialize a new minigit repository.

    Creates a .minigit directory with the object database, refs and HEAD.

    Examples:
        minigit init                    # Initialize in current directory
        minigit init my-project         # Initialize in my-project directory
        minigit init -b trunk           # Start on branch 'trunk'
    """
    repo_path = Path(path).resolve()

    if (repo_path / Repository.REPO_DIR_NAME).exists():
        click.echo(error(f"Repository already exists at {repo_path}"))
        raise click.Abort()

    try:
        if not repo_path.exists():
            repo_path.mkdir(parents=True)
            click.echo(info(f"Created directory {repo_path}"))

        repo = Repository(str(repo_path))
        repo.init(initial_branch)
    except PermissionError:
        click.echo(error(f"Permission denied: Cannot create repository at {path}"))
        raise click.Abort()
    except (OSError, MinigitError) as e:
        click.echo(error(f"Failed to initialize repository: {e}"))
        raise click.Abort()

    click.echo(success(f"Initialized empty minigit repository in {repo.repo_dir}"))
    click.echo(info(f"HEAD points at refs/heads/{initial_branch}"))

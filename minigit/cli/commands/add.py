"""Add command - stage files for commit."""

import click
from pathlib import Path
from minigit.core.errors import MinigitError
from minigit.core.index import stage_files
from minigit.core.repository import Repository
from minigit.cli.output import success, error, info


def expand_paths(paths):
    """Files named by paths, with directories expanded recursively."""
    files = []
    for path_pattern in paths:
        path = Path(path_pattern).resolve()
        if path.is_dir():
            for file_path in sorted(path.rglob('*')):
                if file_path.is_file() and Repository.REPO_DIR_NAME not in file_path.parts:
                    files.append(file_path)
        else:
            files.append(path)
    return files


@click.command('add')
@click.argument('paths', nargs=-1, required=True)
def add_cmd(paths):
    """
    Add file contents to the staging area.

    Stage files for the next commit. Modified files must be added
    again to stage the new changes. Directories are added recursively.

    Examples:
        minigit add file.txt
        minigit add src/
        minigit add .
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a minigit repository"))
        raise click.Abort()

    try:
        staged = stage_files(repo, expand_paths(paths))
    except MinigitError as e:
        click.echo(error(f"Failed to add files: {e}"))
        raise click.Abort()

    if not staged:
        click.echo(error("No files matched"))
        return

    click.echo(success(f"Added {len(staged)} file(s) to staging area"))
    for entry in staged:
        click.echo(info(f"  {entry.path}"))

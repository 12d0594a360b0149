"""List tree contents and inspect stored objects."""

import click
from minigit.core.errors import MinigitError
from minigit.core.hash import is_valid_hash
from minigit.core.objects import OBJECT_TYPES, Blob, Commit, Tree
from minigit.core.repository import Repository
from minigit.cli.output import error
from colorama import Fore, Style


def resolve_tree(repo, treeish):
    """Tree hash for a commit, tree, branch name or HEAD."""
    obj_hash = repo.refs.resolve_reference(treeish)
    if not obj_hash:
        raise click.BadParameter(f"Not a valid reference: {treeish}")

    obj = repo.objects.read(obj_hash)
    if isinstance(obj, Commit):
        return obj.tree
    if isinstance(obj, Tree):
        return obj_hash
    raise click.BadParameter(f"Not a valid tree-ish: {treeish}")


@click.command('ls-tree')
@click.option('-r', '--recursive', is_flag=True, help='Recurse into sub-trees')
@click.option('--name-only', is_flag=True, help='Show only file names')
@click.argument('treeish', required=False, default='HEAD')
def ls_tree_cmd(recursive, name_only, treeish):
    """
    List contents of a tree object.

    TREEISH can be a commit hash, tree hash or branch name. Defaults to HEAD.

    Examples:
        minigit ls-tree                  # Show tree for HEAD
        minigit ls-tree main             # Show tree for main branch
        minigit ls-tree -r HEAD          # Recursively list all files
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a minigit repository"))
        raise click.Abort()

    try:
        tree_hash = resolve_tree(repo, treeish)
        display_tree(repo, tree_hash, "", recursive, name_only)
    except click.BadParameter as e:
        click.echo(error(e.message))
        raise click.Abort()
    except MinigitError as e:
        click.echo(error(f"ls-tree failed: {e}"))
        raise click.Abort()


def display_tree(repo, tree_hash, prefix, recursive, name_only):
    """Display tree entries with optional recursion."""
    for entry in repo.objects.read_tree(tree_hash).entries:
        full_path = f"{prefix}{entry.name}"

        if entry.is_dir and recursive:
            display_tree(repo, entry.hash, full_path + "/", recursive, name_only)
            continue

        if name_only:
            click.echo(full_path)
        elif entry.is_dir:
            click.echo(f"{entry.mode} tree {Fore.YELLOW}{entry.hash}{Style.RESET_ALL}\t{Fore.BLUE}{full_path}{Style.RESET_ALL}")
        else:
            click.echo(f"{entry.mode} blob {Fore.YELLOW}{entry.hash}{Style.RESET_ALL}\t{full_path}")


@click.command('cat-file')
@click.option('-t', '--type', 'show_type', is_flag=True, help='Show object type')
@click.option('-s', '--size', 'show_size', is_flag=True, help='Show object size')
@click.option('-p', '--pretty', is_flag=True, help='Pretty-print object content')
@click.argument('object_hash')
def cat_file_cmd(show_type, show_size, pretty, object_hash):
    """
    Show object content, type, or size.

    Examples:
        minigit cat-file -t <hash>     # Show object type
        minigit cat-file -s <hash>     # Show object size
        minigit cat-file -p <hash>     # Pretty-print object content
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a minigit repository"))
        raise click.Abort()

    if not is_valid_hash(object_hash):
        click.echo(error(f"Not a valid object name: {object_hash}"))
        raise click.Abort()

    try:
        kind, body = repo.objects.load(object_hash)
        obj = OBJECT_TYPES[kind].from_body(body)
    except MinigitError as e:
        click.echo(error(f"cat-file failed: {e}"))
        raise click.Abort()

    if show_type:
        click.echo(kind)
        return

    if show_size:
        click.echo(len(body))
        return

    if isinstance(obj, Commit):
        click.echo(f"{Fore.YELLOW}tree {obj.tree}{Style.RESET_ALL}")
        for parent in obj.parents:
            click.echo(f"{Fore.YELLOW}parent {parent}{Style.RESET_ALL}")
        click.echo(f"author {obj.author}")
        click.echo(f"committer {obj.committer}")
        click.echo()
        click.echo(obj.message)
    elif isinstance(obj, Tree):
        for entry in obj.entries:
            click.echo(f"{entry.mode} {entry.type} {Fore.YELLOW}{entry.hash}{Style.RESET_ALL}\t{entry.name}")
    elif isinstance(obj, Blob):
        if pretty:
            click.echo(obj.data.decode('utf-8', errors='replace'), nl=False)
        else:
            click.get_binary_stream('stdout').write(obj.data)

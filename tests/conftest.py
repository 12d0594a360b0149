"""Shared pytest fixtures for minigit tests."""

import pytest
import tempfile
import shutil
from pathlib import Path
from click.testing import CliRunner
from minigit.core.index import IndexEntry
from minigit.core.objects import Blob, Tree, Commit
from minigit.core.projection import project
from minigit.core.repository import Repository
from minigit.operations.commit import write_commit

AUTHOR = "Test User <test@example.com> 1700000000 +0000"


@pytest.fixture(autouse=True)
def isolated_identity(monkeypatch, tmp_path_factory):
    """Keep tests independent of the user's environment and global config."""
    for role in ('AUTHOR', 'COMMITTER'):
        monkeypatch.setenv(f"GIT_{role}_NAME", "Test User")
        monkeypatch.setenv(f"GIT_{role}_EMAIL", "test@example.com")
        monkeypatch.setenv(f"GIT_{role}_DATE", "1700000000 +0000")
    monkeypatch.setenv("MINIGIT_GLOBAL_CONFIG", str(tmp_path_factory.mktemp("home") / ".minigitconfig"))
    for var in ("MINIGIT_USER_NAME", "MINIGIT_USER_EMAIL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir).resolve()
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def repo(temp_dir):
    """Create an initialized repository on disk."""
    repo = Repository(str(temp_dir))
    repo.init()
    return repo


@pytest.fixture
def memory_repo():
    """Bare repository held entirely in memory."""
    return Repository.in_memory()


@pytest.fixture
def sample_blob():
    """Create a sample blob object."""
    return Blob(b"Hello, World!\n")


@pytest.fixture
def sample_tree(memory_repo, sample_blob):
    """Create a sample tree with one blob."""
    blob_hash = memory_repo.objects.write(sample_blob)
    tree = Tree()
    tree.add_entry('100644', 'test.txt', blob_hash)
    return tree


@pytest.fixture
def sample_commit(memory_repo, sample_tree):
    """Sample commit object."""
    return Commit.create(
        tree_hash=memory_repo.objects.write(sample_tree),
        parent_hashes=[],
        author=AUTHOR,
        committer=AUTHOR,
        message="Test commit"
    )


def snapshot(repo, files, parents=(), message="Test commit", move_head=False):
    """
    Store ``{path: content}`` as a tree and commit it.

    HEAD only moves when move_head is set; otherwise the commit is written
    without touching refs.

    Returns:
        str: Commit hash
    """
    entries = [
        IndexEntry(mode='100644', path=path, hash=repo.objects.write(Blob(content)))
        for path, content in files.items()
    ]
    tree_hash = project(repo.objects, entries)
    if move_head:
        return write_commit(repo, tree_hash, list(parents), message, AUTHOR, AUTHOR)
    commit = Commit.create(tree_hash, list(parents), AUTHOR, AUTHOR, message)
    return repo.objects.write(commit)


@pytest.fixture
def make_commit():
    """Factory fixture: ``make_commit(repo, files, parents=(), ...)``."""
    return snapshot


@pytest.fixture
def repo_with_commits(repo):
    """Repository with two commits on main, work tree and index in sync."""
    from minigit.core.index import stage_files
    from minigit.operations.commit import commit_index

    (repo.work_tree / "file1.txt").write_text("Hello, World!")
    stage_files(repo, ["file1.txt"])
    commit_index(repo, "First commit")

    (repo.work_tree / "file2.txt").write_text("Second file")
    stage_files(repo, ["file2.txt"])
    commit_index(repo, "Second commit")
    return repo


@pytest.fixture
def working_files(repo):
    """Create sample file structure in repository."""
    file1 = repo.work_tree / "test1.txt"
    file2 = repo.work_tree / "test2.txt"

    (repo.work_tree / "subdir").mkdir()
    file3 = repo.work_tree / "subdir" / "test3.txt"

    file1.write_text("Content 1")
    file2.write_text("Content 2")
    file3.write_text("Content 3")

    return {
        'file1': file1,
        'file2': file2,
        'file3': file3
    }


@pytest.fixture
def runner():
    """Click test runner."""
    return CliRunner()


@pytest.fixture
def in_repo(repo_with_commits, monkeypatch):
    """Run CLI commands from inside repo_with_commits."""
    monkeypatch.chdir(repo_with_commits.work_tree)
    return repo_with_commits

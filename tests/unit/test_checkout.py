"""Work tree snapshot, checkout and status tests."""

import os
import pytest
from minigit.core.errors import PreconditionError
from minigit.core.index import stage_files
from minigit.core.objects import Blob, MODE_EXECUTABLE
from minigit.core.projection import flatten, flatten_to_map
from minigit.operations.commit import commit_index
from minigit.operations.worktree import (
    checkout_head, checkout_tree, materialize, scan_work_tree, status, switch_to, write_tree,
)


def test_write_tree_snapshots_directory(repo, working_files):
    tree_hash = write_tree(repo.objects, repo.work_tree)
    files = flatten_to_map(repo.objects, tree_hash)

    assert files == {
        'subdir/test3.txt': Blob(b'Content 3').hash,
        'test1.txt': Blob(b'Content 1').hash,
        'test2.txt': Blob(b'Content 2').hash,
    }


def test_write_tree_of_empty_directory(repo):
    assert write_tree(repo.objects, repo.work_tree) == '4b825dc642cb6eb9a060e54bf8d69288fbee4904'


def test_write_tree_records_executable_mode(repo):
    script = repo.work_tree / 'run.sh'
    script.write_text('#!/bin/sh\n')
    script.chmod(0o755)

    entries = flatten(repo.objects, write_tree(repo.objects, repo.work_tree))
    assert entries[0].mode == MODE_EXECUTABLE


def test_checkout_tree_replaces_work_tree(repo, working_files):
    tree_hash = write_tree(repo.objects, repo.work_tree)

    working_files['file1'].write_text('changed')
    (repo.work_tree / 'extra.txt').write_text('extra')
    working_files['file3'].unlink()

    index = checkout_tree(repo.objects, repo.work_tree, tree_hash)

    assert working_files['file1'].read_text() == 'Content 1'
    assert working_files['file3'].read_text() == 'Content 3'
    assert not (repo.work_tree / 'extra.txt').exists()
    assert (repo.work_tree / '.minigit' / 'HEAD').exists()
    assert sorted(e.path for e in index) == ['subdir/test3.txt', 'test1.txt', 'test2.txt']


def test_checkout_restores_executable_bit(repo):
    script = repo.work_tree / 'run.sh'
    script.write_text('#!/bin/sh\n')
    script.chmod(0o755)
    tree_hash = write_tree(repo.objects, repo.work_tree)
    script.unlink()

    checkout_tree(repo.objects, repo.work_tree, tree_hash)
    assert os.access(script, os.X_OK)


def test_checkout_head_without_commits(repo):
    with pytest.raises(PreconditionError):
        checkout_head(repo)


def test_checkout_head_restores_last_commit(repo_with_commits):
    (repo_with_commits.work_tree / 'file1.txt').write_text('scribble')
    checkout_head(repo_with_commits)
    assert (repo_with_commits.work_tree / 'file1.txt').read_text() == 'Hello, World!'


def test_switch_to_branch(repo_with_commits):
    repo = repo_with_commits
    first = repo.objects.read_commit(repo.refs.resolve_head()).parents[0]
    repo.refs.create_branch('old', first)

    assert switch_to(repo, 'old') == first
    assert repo.refs.get_current_branch() == 'old'
    assert not (repo.work_tree / 'file2.txt').exists()
    assert [e.path for e in repo.read_index()] == ['file1.txt']

    switch_to(repo, 'refs/heads/main')
    assert repo.refs.get_current_branch() == 'main'
    assert (repo.work_tree / 'file2.txt').read_text() == 'Second file'


def test_switch_to_commit_detaches_head(repo_with_commits):
    repo = repo_with_commits
    head = repo.refs.resolve_head()
    first = repo.objects.read_commit(head).parents[0]

    switch_to(repo, first)

    assert repo.refs.read_head().symbolic is False
    assert repo.refs.resolve_head() == first
    assert repo.refs.read_ref('refs/heads/main') == head


def test_switch_to_tree_keeps_head(repo_with_commits):
    repo = repo_with_commits
    head = repo.refs.resolve_head()
    tree_hash = repo.objects.read_commit(head).tree
    (repo.work_tree / 'file1.txt').unlink()

    switch_to(repo, tree_hash)

    assert repo.refs.get_current_branch() == 'main'
    assert (repo.work_tree / 'file1.txt').exists()


@pytest.mark.parametrize('target', ['nope', 'f' * 40])
def test_switch_to_unknown_target(repo_with_commits, target):
    with pytest.raises(PreconditionError, match='Unknown revision'):
        switch_to(repo_with_commits, target)


def test_switch_to_blob_is_rejected(repo_with_commits):
    blob_hash = repo_with_commits.objects.write(Blob(b'loose'))
    with pytest.raises(PreconditionError):
        switch_to(repo_with_commits, blob_hash)


def test_materialize_bare_repository_only_writes_index(memory_repo, make_commit):
    commit_hash = make_commit(memory_repo, {'a/b.txt': b'x', 'c.txt': b'y'})
    tree_hash = memory_repo.objects.read_commit(commit_hash).tree

    index = materialize(memory_repo, tree_hash)

    assert sorted(e.path for e in index) == ['a/b.txt', 'c.txt']
    assert sorted(e.path for e in memory_repo.read_index()) == ['a/b.txt', 'c.txt']
    assert not any(path.startswith('a/') for path in memory_repo.storage.files)


def test_scan_work_tree_skips_repository(repo, working_files):
    files = scan_work_tree(repo.work_tree)
    assert sorted(files) == ['subdir/test3.txt', 'test1.txt', 'test2.txt']
    assert len(repo.objects) == 0


def test_status_clean(repo_with_commits):
    report = status(repo_with_commits)
    assert report.clean
    assert report.branch == 'main'
    assert report.head == repo_with_commits.refs.resolve_head()


def test_status_reports_each_category(repo_with_commits):
    repo = repo_with_commits
    work = repo.work_tree

    (work / 'new.txt').write_text('new')
    stage_files(repo, ['new.txt'])
    (work / 'file1.txt').write_text('staged change')
    stage_files(repo, ['file1.txt'])
    (work / 'file1.txt').write_text('then changed again')
    (work / 'file2.txt').unlink()
    (work / 'loose.txt').write_text('untracked')

    report = status(repo)

    assert report.staged_new == ['new.txt']
    assert report.staged_modified == ['file1.txt']
    assert report.unstaged_modified == ['file1.txt']
    assert report.unstaged_deleted == ['file2.txt']
    assert report.untracked == ['loose.txt']
    assert report.has_staged and report.has_unstaged
    assert not report.clean


def test_status_staged_deletion(repo_with_commits):
    repo = repo_with_commits
    index = repo.read_index()
    index.remove_entry('file2.txt')
    repo.write_index(index)
    (repo.work_tree / 'file2.txt').unlink()

    report = status(repo)
    assert report.staged_deleted == ['file2.txt']
    assert report.unstaged_deleted == []


def test_status_before_first_commit(repo, working_files):
    stage_files(repo, [working_files['file1']])
    report = status(repo)
    assert report.head is None
    assert report.staged_new == ['test1.txt']
    assert report.untracked == ['subdir/test3.txt', 'test2.txt']


def test_status_of_bare_repository(memory_repo):
    with pytest.raises(PreconditionError):
        status(memory_repo)


def test_commit_after_checkout_uses_restored_index(repo_with_commits):
    repo = repo_with_commits
    head = repo.refs.resolve_head()
    first = repo.objects.read_commit(head).parents[0]
    repo.refs.create_branch('old', first)
    switch_to(repo, 'old')

    result = commit_index(repo, 'on old')

    commit = repo.objects.read_commit(result.commit_hash)
    assert commit.parents == [first]
    assert flatten_to_map(repo.objects, commit.tree) == {'file1.txt': Blob(b'Hello, World!').hash}

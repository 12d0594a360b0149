"""Commit DAG ancestry tests."""

import pytest
from minigit.core.errors import ObjectNotFoundError
from minigit.operations.history import (can_fast_forward, common_ancestor, get_ancestors,
                                        is_ancestor, iter_ancestors, walk_history)


@pytest.fixture
def diamond(memory_repo, make_commit):
    """
    root <- left  <- merge
         <- right <-/
    """
    root = make_commit(memory_repo, {'f': b'0'}, message='root')
    left = make_commit(memory_repo, {'f': b'L'}, [root], message='left')
    right = make_commit(memory_repo, {'f': b'R'}, [root], message='right')
    merge = make_commit(memory_repo, {'f': b'M'}, [left, right], message='merge')
    return memory_repo.objects, dict(root=root, left=left, right=right, merge=merge)


def test_commit_is_its_own_ancestor(diamond):
    store, c = diamond
    assert is_ancestor(store, c['root'], c['root'])


def test_is_ancestor_follows_parents(diamond):
    store, c = diamond
    assert is_ancestor(store, c['root'], c['merge'])
    assert is_ancestor(store, c['right'], c['merge'])
    assert not is_ancestor(store, c['merge'], c['root'])
    assert not is_ancestor(store, c['left'], c['right'])


def test_iter_ancestors_visits_each_commit_once(diamond):
    store, c = diamond
    order = list(iter_ancestors(store, c['merge']))
    assert order == [c['merge'], c['left'], c['right'], c['root']]


def test_get_ancestors(diamond):
    store, c = diamond
    assert get_ancestors(store, c['left']) == {c['left'], c['root']}


def test_common_ancestor_of_siblings(diamond):
    store, c = diamond
    assert common_ancestor(store, c['left'], c['right']) == c['root']


def test_common_ancestor_when_one_contains_the_other(diamond):
    store, c = diamond
    assert common_ancestor(store, c['root'], c['merge']) == c['root']
    assert common_ancestor(store, c['merge'], c['left']) == c['left']


def test_common_ancestor_same_commit(diamond):
    store, c = diamond
    assert common_ancestor(store, c['left'], c['left']) == c['left']


def test_common_ancestor_unrelated(memory_repo, make_commit):
    a = make_commit(memory_repo, {'a': b'a'})
    b = make_commit(memory_repo, {'b': b'b'})
    assert common_ancestor(memory_repo.objects, a, b) is None


def test_can_fast_forward(diamond):
    store, c = diamond
    assert can_fast_forward(store, c['root'], c['merge'])
    assert not can_fast_forward(store, c['left'], c['right'])


def test_walk_history_limit(diamond):
    store, c = diamond
    history = walk_history(store, c['merge'], max_count=2)
    assert [h for h, _ in history] == [c['merge'], c['left']]
    assert history[0][1].message == 'merge'


def test_missing_parent_raises(memory_repo, make_commit):
    orphan = make_commit(memory_repo, {'f': b'x'}, ['d' * 40])
    with pytest.raises(ObjectNotFoundError):
        list(iter_ancestors(memory_repo.objects, orphan))

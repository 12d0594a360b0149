"""Integration tests for pack-objects and unpack-objects."""

from minigit.cli.main import cli
from minigit.core.repository import Repository


class TestPackCommands:
    """Round trip a repository's objects through a pack file."""

    def test_pack_then_unpack_into_fresh_repository(self, runner, in_repo, temp_dir, monkeypatch):
        pack_path = temp_dir / 'backup.mpk'
        object_count = len(in_repo.objects)

        result = runner.invoke(cli, ['pack-objects', str(pack_path)])
        assert result.exit_code == 0
        assert f'Packed {object_count} objects' in result.output

        target = temp_dir / 'clone'
        runner.invoke(cli, ['init', str(target)])
        monkeypatch.chdir(target)

        result = runner.invoke(cli, ['unpack-objects', str(pack_path)])
        assert result.exit_code == 0
        assert f'Unpacked {object_count} new objects' in result.output

        clone = Repository(target)
        head = in_repo.refs.resolve_head()
        assert clone.objects.read_commit(head).message == 'Second commit'

        again = runner.invoke(cli, ['unpack-objects', str(pack_path)])
        assert 'Unpacked 0 new objects' in again.output

    def test_pack_empty_repository_fails(self, runner, repo, temp_dir, monkeypatch):
        monkeypatch.chdir(repo.work_tree)
        result = runner.invoke(cli, ['pack-objects', str(temp_dir / 'x.mpk')])
        assert result.exit_code == 1
        assert 'No objects to pack' in result.output

    def test_unpack_corrupt_pack(self, runner, in_repo, temp_dir):
        bad = temp_dir / 'bad.mpk'
        bad.write_bytes(b'NOPE\x00\x00\x00\x00')
        result = runner.invoke(cli, ['unpack-objects', str(bad)])
        assert result.exit_code == 1
        assert 'Bad pack magic' in result.output

    def test_unpack_missing_file(self, runner, in_repo):
        result = runner.invoke(cli, ['unpack-objects', 'missing.mpk'])
        assert result.exit_code == 2

"""Tests for archive creation, including concurrent writers."""

import tarfile
import threading

import pytest

from depcache.cache.lock import LockMode, acquire, release
from depcache.cache.writer import (
    WriteResult,
    archive_member_name,
    temp_path_for,
    write_archive,
)
from depcache.exceptions import ArchiveFailedError, LockTimeoutError


@pytest.fixture
def installed(project):
    deps = project / "deps"
    (deps / "sub").mkdir(parents=True)
    (deps / "a.txt").write_text("alpha")
    (deps / "sub" / "b.txt").write_text("beta")
    return deps


@pytest.fixture
def cache_path(cache_dir):
    return cache_dir / "fakepm" / "1.0.0" / "abc123.tar.gz"


@pytest.mark.short
class TestWriteArchive:
    def test_writes_archive_relative_to_root(self, project, installed, cache_path):
        result = write_archive(installed, cache_path, root=project)

        assert result is WriteResult.WRITTEN
        assert cache_path.is_file()
        with tarfile.open(cache_path, "r:gz") as tar:
            names = set(tar.getnames())
        assert names == {"deps", "deps/a.txt", "deps/sub", "deps/sub/b.txt"}

    def test_relative_install_directory(self, project, installed, cache_path):
        assert write_archive("deps", cache_path, root=project) is WriteResult.WRITTEN
        assert cache_path.is_file()

    def test_missing_install_directory_is_noop(self, project, cache_path):
        result = write_archive(project / "deps", cache_path, root=project)

        assert result is WriteResult.SKIPPED_MISSING
        assert not cache_path.exists()
        assert not temp_path_for(cache_path).exists()

    def test_existing_entry_is_kept(self, project, installed, cache_path):
        cache_path.parent.mkdir(parents=True)
        cache_path.write_bytes(b"published by someone else")

        result = write_archive(installed, cache_path, root=project)

        assert result is WriteResult.SKIPPED_EXISTS
        assert cache_path.read_bytes() == b"published by someone else"
        assert not temp_path_for(cache_path).exists()

    def test_no_temp_file_left_after_success(self, project, installed, cache_path):
        write_archive(installed, cache_path, root=project)

        assert not temp_path_for(cache_path).exists()
        assert list(cache_path.parent.iterdir()) == [cache_path]

    def test_install_directory_outside_root(self, tmp_path, project, cache_path):
        outside = tmp_path / "elsewhere"
        outside.mkdir()

        with pytest.raises(ArchiveFailedError, match="must be inside"):
            write_archive(outside, cache_path, root=project)

    def test_member_name(self, project):
        assert archive_member_name(project / "node_modules", project) == "node_modules"
        assert archive_member_name(project / "a" / "b", project) == "a/b"

    def test_compression_failure_cleans_up(self, project, installed, cache_path, monkeypatch):
        def broken_open(*args, **kwargs):
            raise tarfile.TarError("disk full")

        monkeypatch.setattr("depcache.cache.writer.tarfile.open", broken_open)

        with pytest.raises(ArchiveFailedError, match="disk full"):
            write_archive(installed, cache_path, root=project)

        assert not cache_path.exists()
        assert not temp_path_for(cache_path).exists()

    def test_lock_timeout(self, project, installed, cache_path):
        tmp_path = temp_path_for(cache_path)
        tmp_path.parent.mkdir(parents=True)
        with open(tmp_path, "ab") as other_writer:
            acquire(other_writer, LockMode.EXCLUSIVE)
            try:
                with pytest.raises(LockTimeoutError):
                    write_archive(installed, cache_path, root=project, lock_timeout=0.3)
            finally:
                release(other_writer)

        assert not cache_path.exists()


@pytest.mark.short
class TestConcurrentWriters:
    def test_exactly_one_archive_is_written(self, project, installed, cache_path):
        writers = 8
        barrier = threading.Barrier(writers)
        results = []
        errors = []
        results_lock = threading.Lock()

        def write():
            barrier.wait()
            try:
                result = write_archive(installed, cache_path, root=project)
            except Exception as e:
                with results_lock:
                    errors.append(e)
                return
            with results_lock:
                results.append(result)

        threads = [threading.Thread(target=write) for _ in range(writers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        assert errors == []
        assert results.count(WriteResult.WRITTEN) == 1
        assert results.count(WriteResult.SKIPPED_EXISTS) == writers - 1
        assert not temp_path_for(cache_path).exists()
        with tarfile.open(cache_path, "r:gz") as tar:
            assert tar.extractfile("deps/a.txt").read() == b"alpha"

    def test_waiting_writer_skips_after_publish(self, project, installed, cache_path):
        """A writer queued behind the lock sees the published entry and skips."""
        tmp_path = temp_path_for(cache_path)
        tmp_path.parent.mkdir(parents=True)
        holder = open(tmp_path, "ab")
        acquire(holder, LockMode.EXCLUSIVE)

        results = []
        thread = threading.Thread(
            target=lambda: results.append(
                write_archive(installed, cache_path, root=project)
            )
        )
        thread.start()

        # Publish as the lock holder would, then let the waiter in
        with tarfile.open(fileobj=holder, mode="w:gz") as tar:
            tar.add(str(installed), arcname="deps")
        holder.flush()
        tmp_path.rename(cache_path)
        release(holder)
        holder.close()
        thread.join(timeout=30)

        assert results == [WriteResult.SKIPPED_EXISTS]
        with tarfile.open(cache_path, "r:gz") as tar:
            assert "deps/sub/b.txt" in tar.getnames()


@pytest.mark.short
class TestSymlinks:
    def test_absolute_link_is_rejected(self, project, installed, cache_path):
        (installed / "link").symlink_to(installed / "a.txt")

        with pytest.raises(ArchiveFailedError, match="absolute"):
            write_archive(installed, cache_path, root=project)

        assert not cache_path.exists()
        assert not temp_path_for(cache_path).exists()

    def test_link_escaping_root_is_rejected(self, project, installed, cache_path):
        (installed / "link").symlink_to("../../outside.txt")

        with pytest.raises(ArchiveFailedError):
            write_archive(installed, cache_path, root=project)

        assert not cache_path.exists()

    def test_relative_link_is_kept(self, project, installed, cache_path):
        (installed / "link").symlink_to("a.txt")

        assert write_archive(installed, cache_path, root=project) is WriteResult.WRITTEN
        with tarfile.open(cache_path, "r:gz") as tar:
            member = tar.getmember("deps/link")
        assert member.issym()
        assert member.linkname == "a.txt"

"""Tests for the scaffold filesystem backends."""
import pytest

from ocpinit.errors import ReadError, StatError
from ocpinit.scaffold.filesystem import DEFAULT_FILE_MODE, LocalFilesystem, MemoryFilesystem


class TestMemoryFilesystem:
    """In-memory backend."""

    def test_read_write_stat(self):
        memfs = MemoryFilesystem({"a/b.txt": "hello"})

        assert memfs.read_file("a/b.txt") == b"hello"
        assert memfs.stat("a/b.txt").mode == DEFAULT_FILE_MODE

        memfs.write_file("a/b.txt", b"bye", 0o600)
        assert memfs.read_file("a/b.txt") == b"bye"
        assert memfs.stat("a/b.txt").mode == 0o600

    def test_paths_are_normalized(self):
        memfs = MemoryFilesystem({"./config/default/x.yaml": "x"})
        assert memfs.read_file("config/default/x.yaml") == b"x"
        assert memfs.exists("config/./default/x.yaml")

    def test_missing_file(self):
        memfs = MemoryFilesystem()
        with pytest.raises(FileNotFoundError):
            memfs.read_file("go.mod")
        with pytest.raises(FileNotFoundError):
            memfs.stat("go.mod")
        assert not memfs.exists("go.mod")

    def test_read_only(self):
        memfs = MemoryFilesystem({"go.mod": "go 1.19\n"}, read_only=True)
        with pytest.raises(PermissionError):
            memfs.write_file("go.mod", b"go 1.20\n")
        assert memfs.read_file("go.mod") == b"go 1.19\n"

    def test_snapshot_copies_only_given_paths(self, go_project_dir):
        (go_project_dir / "Dockerfile").chmod(0o640)
        (go_project_dir / ".git").mkdir()
        (go_project_dir / ".git" / "HEAD").write_text("ref: refs/heads/main\n")

        memfs = MemoryFilesystem.snapshot(LocalFilesystem(go_project_dir), ["Dockerfile", "go.mod"])

        assert list(memfs) == ["Dockerfile", "go.mod"]
        assert memfs.stat("Dockerfile").mode == 0o640
        assert memfs.read_file("go.mod") == (go_project_dir / "go.mod").read_bytes()

    def test_snapshot_follows_symlinks(self, go_project_dir):
        dockerfile = go_project_dir / "Dockerfile"
        dockerfile.rename(go_project_dir / "Dockerfile.real")
        dockerfile.symlink_to("Dockerfile.real")

        memfs = MemoryFilesystem.snapshot(LocalFilesystem(go_project_dir), ["Dockerfile"])

        assert memfs.read_file("Dockerfile") == (go_project_dir / "Dockerfile.real").read_bytes()

    def test_snapshot_missing_path(self, tmp_path):
        with pytest.raises(ReadError) as exc_info:
            MemoryFilesystem.snapshot(LocalFilesystem(tmp_path), ["go.mod"])
        assert exc_info.value.path == "go.mod"

    def test_snapshot_stat_failure(self):
        class NoStatFilesystem(MemoryFilesystem):
            def stat(self, path):
                raise PermissionError(f"stat denied: {path}")

        with pytest.raises(StatError) as exc_info:
            MemoryFilesystem.snapshot(NoStatFilesystem({"go.mod": "go 1.19\n"}), ["go.mod"])
        assert exc_info.value.path == "go.mod"


class TestLocalFilesystem:
    """Directory-rooted backend."""

    def test_roundtrip_with_mode(self, tmp_path):
        fs = LocalFilesystem(tmp_path)

        fs.write_file("hack/boilerplate.go.txt", b"/* header */\n", 0o600)

        target = tmp_path / "hack" / "boilerplate.go.txt"
        assert target.read_bytes() == b"/* header */\n"
        assert fs.stat("hack/boilerplate.go.txt").mode == 0o600
        assert fs.read_file("hack/boilerplate.go.txt") == b"/* header */\n"

    def test_missing_file(self, tmp_path):
        fs = LocalFilesystem(tmp_path)
        with pytest.raises(FileNotFoundError):
            fs.read_file("Dockerfile")
        assert not fs.exists("Dockerfile")

    @pytest.mark.parametrize("path", ["../outside.txt", "/etc/passwd", "config/../../x"])
    def test_rejects_paths_outside_root(self, tmp_path, path):
        fs = LocalFilesystem(tmp_path / "project")
        with pytest.raises(PermissionError):
            fs.write_file(path, b"x")

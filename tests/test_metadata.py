import os
import pytest
from datetime import datetime
from pathlib import Path
from fs_analyzer import config
from fs_analyzer.exceptions import AccessError
from fs_analyzer.metadata.extract import MetadataExtractor


def test_extension_rules():
    ext = MetadataExtractor.extension_for
    assert ext("archive.tar.gz", False) == "gz"
    assert ext("Photo.JPG", False) == "jpg"
    assert ext(".gitignore", False) is None
    assert ext("trailing.", False) is None
    assert ext("README", False) is None
    assert ext("site.d", True) is None


def test_extract_file(tmp_path):
    p = tmp_path / "report.PDF"
    p.write_bytes(b"x" * 42)

    rec = MetadataExtractor().extract(p)

    assert rec.name == "report.PDF"
    assert rec.path == str(p)
    assert rec.absolute_path == str(p.absolute())
    assert rec.size_bytes == 42
    assert rec.is_directory is False
    assert rec.extension == "pdf"
    assert isinstance(rec.modified_at, datetime)
    assert rec.modified_at.tzinfo is None
    assert rec.created_at is None or isinstance(rec.created_at, datetime)
    assert rec.owner


def test_extract_directory_has_no_size_or_extension(tmp_path):
    d = tmp_path / "photos.d"
    d.mkdir()
    (d / "inner.txt").write_bytes(b"data")

    rec = MetadataExtractor().extract(d)

    assert rec.is_directory is True
    assert rec.size_bytes == 0
    assert rec.extension is None
    assert rec.child_file_count == 0


def test_extract_keeps_relative_path_as_given(tmp_path, monkeypatch):
    (tmp_path / "notes.md").write_text("hi")
    monkeypatch.chdir(tmp_path)

    rec = MetadataExtractor().extract("notes.md")

    assert rec.path == "notes.md"
    assert rec.absolute_path == os.path.join(os.getcwd(), "notes.md")


def test_missing_entry_raises_access_error(tmp_path):
    missing = tmp_path / "gone.txt"
    with pytest.raises(AccessError) as exc_info:
        MetadataExtractor().extract(missing)
    assert exc_info.value.path == str(missing)
    assert isinstance(exc_info.value.__cause__, FileNotFoundError)


@pytest.mark.parametrize("error", [KeyError("uid 4242"), PermissionError("denied"), NotImplementedError()])
def test_owner_failure_falls_back_to_unknown(tmp_path, error):
    p = tmp_path / "file.txt"
    p.write_text("x")

    def broken_resolver(path):
        raise error

    rec = MetadataExtractor(owner_resolver=broken_resolver).extract(p)

    assert rec.owner == config.UNKNOWN_OWNER
    assert rec.size_bytes == 1


def test_custom_owner_resolver_receives_path(tmp_path):
    p = tmp_path / "file.txt"
    p.write_text("x")
    seen = []

    def resolver(path):
        seen.append(path)
        return "alice"

    rec = MetadataExtractor(owner_resolver=resolver).extract(p)

    assert rec.owner == "alice"
    assert seen == [Path(p)]


@pytest.mark.skipif(not hasattr(os, "symlink") or os.name == "nt", reason="POSIX symlinks required")
def test_symlink_to_directory_is_not_followed(tmp_path):
    target = tmp_path / "target"
    target.mkdir()
    link = tmp_path / "link.dir"
    link.symlink_to(target, target_is_directory=True)

    rec = MetadataExtractor().extract(link)

    assert rec.is_symlink is True
    assert rec.is_directory is False
    assert rec.extension == "dir"


@pytest.mark.skipif(not hasattr(os, "symlink") or os.name == "nt", reason="POSIX symlinks required")
def test_broken_symlink_is_still_described(tmp_path):
    link = tmp_path / "dangling"
    link.symlink_to(tmp_path / "nowhere")

    rec = MetadataExtractor().extract(link)

    assert rec.is_symlink is True
    assert rec.owner == config.UNKNOWN_OWNER


def test_extract_accepts_dir_entry(tmp_path):
    (tmp_path / "a.txt").write_bytes(b"abc")
    with os.scandir(tmp_path) as it:
        entry = next(it)

    rec = MetadataExtractor().extract(entry)

    assert rec.path == entry.path
    assert rec.name == "a.txt"
    assert rec.size_bytes == 3


def test_access_error_keeps_path_like_as_text(tmp_path):
    (tmp_path / "a.txt").write_bytes(b"abc")
    with os.scandir(tmp_path) as it:
        entry = next(it)
    (tmp_path / "a.txt").unlink()

    with pytest.raises(AccessError) as exc_info:
        MetadataExtractor().extract(entry)
    assert exc_info.value.path == entry.path


def test_created_at_absent_without_birth_time(tmp_path, monkeypatch):
    p = tmp_path / "file.txt"
    p.write_text("x")
    # mode, ino, dev, nlink, uid, gid, size, atime, mtime, ctime
    fake = os.stat_result((0o100644, 1, 1, 1, 0, 0, 1, 1_700_000_000, 1_700_000_000, 1_700_000_500))
    monkeypatch.setattr(os, "lstat", lambda path: fake)

    rec = MetadataExtractor(owner_resolver=lambda path: "alice").extract(p)

    assert rec.created_at is None
    assert rec.modified_at == datetime.fromtimestamp(1_700_000_000)

import pytest
from fs_analyzer.scanning.filesystem import DirectoryScanner


@pytest.fixture
def sample_tree(tmp_path):
    """
    root/
      a.txt            100 bytes
      archive.tar.gz    10 bytes
      .gitignore         5 bytes
      sub/
        b.bin           50 bytes
        deeper/
          c              0 bytes
      empty/
    """
    root = tmp_path / "root"
    root.mkdir()
    (root / "a.txt").write_bytes(b"a" * 100)
    (root / "archive.tar.gz").write_bytes(b"z" * 10)
    (root / ".gitignore").write_bytes(b"*.pyc")
    sub = root / "sub"
    sub.mkdir()
    (sub / "b.bin").write_bytes(b"b" * 50)
    deeper = sub / "deeper"
    deeper.mkdir()
    (deeper / "c").touch()
    (root / "empty").mkdir()
    return root


@pytest.fixture
def scanner():
    return DirectoryScanner()

"""
文件系统实现单元测试
"""

import pytest

from webexport.fs import LocalFileSystem, MemoryFileSystem
from webexport.interfaces import (
    ContentDecodeError,
    DestinationNotWritableError,
    IoError,
    SourceNotFoundError,
)


class TestLocalFileSystem:
    """本地磁盘实现"""

    def test_write_read_copy(self, tmp_path):
        fs = LocalFileSystem()
        out = (tmp_path / "out" / "libs").as_posix()
        fs.mkdir_all(out)
        fs.write_text(f"{out}/a.js", "var a;")
        fs.copy(f"{out}/a.js", f"{out}/b.js")
        assert fs.read_text(f"{out}/b.js") == "var a;"
        assert fs.is_absolute(out)
        assert not fs.is_absolute("libs/a.js")

    def test_missing_source(self, tmp_path):
        fs = LocalFileSystem()
        with pytest.raises(SourceNotFoundError):
            fs.read_binary((tmp_path / "none.png").as_posix())
        with pytest.raises(SourceNotFoundError):
            fs.copy((tmp_path / "none.png").as_posix(), (tmp_path / "b.png").as_posix())

    def test_missing_parent_not_writable(self, tmp_path):
        with pytest.raises(DestinationNotWritableError):
            LocalFileSystem().write_text((tmp_path / "no" / "dir.js").as_posix(), "x")

    def test_non_utf8_text(self, tmp_path):
        path = tmp_path / "latin1.js"
        path.write_bytes(b"var s = '\xe9';\n")
        with pytest.raises(ContentDecodeError) as exc_info:
            LocalFileSystem().read_text(path.as_posix())
        assert exc_info.value.kind == "io"
        assert exc_info.value.path == path.as_posix()


class TestMemoryFileSystem:
    """内存实现"""

    def test_initial_files_create_parents(self):
        fs = MemoryFileSystem({"/runtime/libs/a.js": "var a;"})
        assert fs.exists("/runtime/libs")
        assert fs.read_binary("/runtime/libs/a.js") == b"var a;"

    def test_read_only_prefix(self):
        fs = MemoryFileSystem(read_only=["/locked"])
        with pytest.raises(DestinationNotWritableError):
            fs.mkdir_all("/locked/out")
        fs.mkdir_all("/free")
        fs.set_read_only("/free")
        with pytest.raises(DestinationNotWritableError):
            fs.write_text("/free/index.html", "")

    def test_parent_must_exist(self):
        with pytest.raises(DestinationNotWritableError):
            MemoryFileSystem().write_text("/out/index.html", "")

    def test_windows_separators(self):
        fs = MemoryFileSystem({"/runtime/gd.js": "gd"})
        assert fs.read_text("\\runtime\\gd.js") == "gd"

    def test_non_utf8_text(self):
        """测试非 UTF-8 文本报 IoError 子类，二进制读取不受影响"""
        fs = MemoryFileSystem({"/runtime/gd.js": b"var s = '\xe9';\n"})
        with pytest.raises(ContentDecodeError) as exc_info:
            fs.read_text("/runtime/gd.js")
        assert isinstance(exc_info.value, IoError)
        assert exc_info.value.path == "/runtime/gd.js"
        assert fs.read_binary("/runtime/gd.js") == b"var s = '\xe9';\n"

# src/infrastructure/fs.py
from pathlib import Path
from typing import BinaryIO, Protocol

from returns.result import Result, safe


class IFileSystem(Protocol):
    """Filesystem operations on the volume shared with the plugin."""

    def read_waitfile(self, waitfile: Path) -> Result[str, Exception]:
        ...

    def open_result(self, result_file: Path) -> BinaryIO:
        ...


class FileSystem:
    """Concrete FS helper."""

    @safe(exceptions=(OSError, UnicodeDecodeError))
    def read_waitfile(self, waitfile: Path) -> str:
        """Return the result file reference written into the waitfile."""
        return waitfile.read_text(encoding="utf-8").strip()

    def open_result(self, result_file: Path) -> BinaryIO:
        return open(result_file, "rb")

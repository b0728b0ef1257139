"""Filesystem Gateway - Infrastructure implementation of FileSystemProtocol."""

import os
import shutil
import tempfile
from collections.abc import Sequence
from fnmatch import fnmatch
from pathlib import Path

from markup_style_linter.domain.constants import SOURCE_EXTENSIONS
from markup_style_linter.domain.exceptions import IOFailure
from markup_style_linter.domain.protocols import FileSystemProtocol


class FileSystemGateway(FileSystemProtocol):
    """Infrastructure implementation of FileSystemProtocol using pathlib."""

    def discover_sources(self, paths: Sequence[str], exclude: Sequence[str] = ()) -> list[str]:
        """
        Expand paths into supported source files.

        Directories are walked recursively in sorted order; explicitly named
        files are kept even with an unsupported extension so that the run can
        report them. Paths matching an exclude glob are dropped. Duplicates
        keep their first position.
        """
        found: list[str] = []
        seen: set[str] = set()
        for raw in paths:
            path_obj = Path(raw)
            if path_obj.is_dir():
                candidates = sorted(
                    p for p in path_obj.rglob("*")
                    if p.is_file() and p.suffix.lower() in SOURCE_EXTENSIONS
                )
            else:
                candidates = [path_obj]
            for candidate in candidates:
                name = str(candidate)
                if name in seen or self._excluded(candidate, exclude):
                    continue
                seen.add(name)
                found.append(name)
        return found

    @staticmethod
    def _excluded(path: Path, exclude: Sequence[str]) -> bool:
        posix = path.as_posix()
        return any(
            fnmatch(posix, pattern) or fnmatch(path.name, pattern) or path.match(pattern)
            for pattern in exclude
        )

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """Read text content from a file."""
        try:
            with open(path, encoding=encoding, newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise IOFailure(path, str(exc)) from exc

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """
        Write text content to a file atomically.

        The content goes to a temporary file in the same directory, which then
        replaces the target, so an interrupted write leaves the original intact.
        The target keeps its permission bits.
        """
        target = Path(path)
        try:
            fd, temp_path = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
        except OSError as exc:
            raise IOFailure(path, str(exc)) from exc
        try:
            with os.fdopen(fd, "w", encoding=encoding, newline="") as f:
                f.write(content)
            if target.exists():
                shutil.copymode(target, temp_path)
            os.replace(temp_path, target)
        except (OSError, UnicodeEncodeError) as exc:
            Path(temp_path).unlink(missing_ok=True)
            raise IOFailure(path, str(exc)) from exc

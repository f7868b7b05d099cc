"""Finding the file a loaded program was read from."""

from __future__ import annotations

import fnmatch
import os
from dataclasses import dataclass
from typing import Any

from pawnamx.amx import HEADER_SIZE, AmxException
from pawnamx.auxiliary import AmxProgram, load_program


@dataclass
class _AmxFile:
    program: AmxProgram
    mtime: int


def _mtime(path: str) -> int:
    try:
        return int(os.stat(path).st_mtime)
    except OSError:
        return 0


def _directory_files(directory: str, pattern: str) -> list[str]:
    try:
        with os.scandir(directory) as entries:
            return [
                entry.name
                for entry in entries
                if entry.is_file() and fnmatch.fnmatch(entry.name, pattern)
            ]
    except OSError:
        return []


class AmxPathFinder:
    """Matches running programs to ``.amx`` files in a set of directories."""

    def __init__(self) -> None:
        self._search_paths: list[str] = []
        self._files: dict[str, _AmxFile] = {}
        self._known: dict[int, tuple[Any, str]] = {}

    def add_search_path(self, path: str | os.PathLike) -> None:
        """Add a directory to scan (non-recursively) for program files."""
        self._search_paths.append(os.fspath(path))

    def add_known_file(self, amx: Any, path: str | os.PathLike) -> None:
        """Record the file of ``amx`` directly, bypassing the search."""
        self._known[id(amx)] = (amx, os.fspath(path))

    def find(self, amx: AmxProgram) -> str | None:
        """Return the path of the file ``amx`` was loaded from, or None."""
        cached = self._known.get(id(amx))
        if cached is not None and cached[0] is amx:
            return cached[1]

        self._refresh()

        header = bytes(amx.memory[:HEADER_SIZE])
        for filename in sorted(self._files):
            other = self._files[filename].program
            if bytes(other.memory[:HEADER_SIZE]) == header:
                self._known[id(amx)] = (amx, filename)
                return filename
        return None

    def _refresh(self) -> None:
        for directory in self._search_paths:
            for name in _directory_files(directory, "*.amx"):
                filename = directory + os.sep + name
                mtime = _mtime(filename)
                known = self._files.get(filename)
                if known is not None and known.mtime >= mtime:
                    continue
                self._files.pop(filename, None)
                try:
                    program = load_program(filename)
                except AmxException:
                    continue
                self._files[filename] = _AmxFile(program, mtime)
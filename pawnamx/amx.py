"""Core definitions of the Pawn abstract machine: error codes, flags and the file header."""

from __future__ import annotations

import enum
import struct
from dataclasses import astuple, dataclass

CUR_FILE_VERSION = 8
"""Current file version; also the current AMX version."""
MIN_FILE_VERSION = 6
"""Lowest supported file format version for the current AMX version."""
MIN_AMX_VERSION = 8
"""Minimum AMX version needed to support the current file format."""

CELL_SIZE = 32
"""Size of a cell in bits."""
CELL_BYTES = CELL_SIZE // 8

AMX_MAGIC = 0xF1E0
"""Signature of a program compiled for 32-bit cells."""

UNPACKEDMAX = (1 << (CELL_BYTES - 1) * 8) - 1
UNLIMITED = 0xFFFFFFFF >> 1

AMX_USERNUM = 4
SEXPMAX = 19
"""Maximum name length for file version <= 6."""
SNAMEMAX = 31
"""Maximum length of a symbol name."""

AMX_EXEC_MAIN = -1
"""Start execution at the program entry point."""
AMX_EXEC_CONT = -2
"""Continue execution from the last address."""

AMX_COMPACTMARGIN = 64

_HEADER_STRUCT = struct.Struct("<iHbbhh11i")
HEADER_SIZE = _HEADER_STRUCT.size
"""Size in bytes of the on-disk program header."""

_CELL_STRUCT = struct.Struct("<i")
_FLOAT_STRUCT = struct.Struct("<f")


class AmxError(enum.IntEnum):
    """Error codes reported by the abstract machine."""

    NONE = 0
    EXIT = 1
    ASSERT = 2
    STACKERR = 3
    BOUNDS = 4
    MEMACCESS = 5
    INVINSTR = 6
    STACKLOW = 7
    HEAPLOW = 8
    CALLBACK = 9
    NATIVE = 10
    DIVIDE = 11
    SLEEP = 12
    INVSTATE = 13
    MEMORY = 16
    FORMAT = 17
    VERSION = 18
    NOTFOUND = 19
    INDEX = 20
    DEBUG = 21
    INIT = 22
    USERDATA = 23
    INIT_JIT = 24
    PARAMS = 25
    DOMAIN = 26
    GENERAL = 27


class AmxFlag(enum.IntFlag):
    """Status flags of a program header."""

    DEBUG = 0x02
    COMPACT = 0x04
    BYTEOPC = 0x08
    NOCHECKS = 0x10
    NTVREG = 0x1000
    JITC = 0x2000
    BROWSE = 0x4000
    RELOC = 0x8000


class AmxException(Exception):
    """An abstract machine operation failed with an error code."""

    def __init__(self, error: int, message: str | None = None) -> None:
        try:
            error = AmxError(error)
        except ValueError:
            pass
        self.error = error
        if message is None:
            message = error.name if isinstance(error, AmxError) else f"error {error}"
        super().__init__(message)


@dataclass
class AmxHeader:
    """The program header, which is both the file and the in-memory format."""

    size: int = 0
    magic: int = AMX_MAGIC
    file_version: int = CUR_FILE_VERSION
    amx_version: int = MIN_AMX_VERSION
    flags: int = 0
    defsize: int = 0
    cod: int = 0
    dat: int = 0
    hea: int = 0
    stp: int = 0
    cip: int = 0
    publics: int = 0
    natives: int = 0
    libraries: int = 0
    pubvars: int = 0
    tags: int = 0
    nametable: int = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> "AmxHeader":
        """Parse a header from the start of ``data``; trailing bytes are ignored."""
        if len(data) < HEADER_SIZE:
            raise AmxException(
                AmxError.FORMAT,
                f"header needs {HEADER_SIZE} bytes, got {len(data)}",
            )
        return cls(*_HEADER_STRUCT.unpack_from(data))

    def to_bytes(self) -> bytes:
        """Serialise the header in its little-endian packed file layout."""
        try:
            return _HEADER_STRUCT.pack(*astuple(self))
        except struct.error as exc:
            raise AmxException(AmxError.PARAMS, str(exc)) from exc


def _tag_byte(value: int | str) -> int:
    if isinstance(value, str):
        if len(value) != 1:
            raise ValueError(f"expected a single character, got {value!r}")
        value = ord(value)
    return value & 0xFF


def amx_user_tag(a: int | str, b: int | str, c: int | str, d: int | str) -> int:
    """Build a user-data tag from four characters, first one in the low byte."""
    return (
        _tag_byte(a)
        | (_tag_byte(b) << 8)
        | (_tag_byte(c) << 16)
        | (_tag_byte(d) << 24)
    )


def float_to_cell(value: float) -> int:
    """Reinterpret a float's bit pattern as a signed 32-bit cell."""
    return _CELL_STRUCT.unpack(_FLOAT_STRUCT.pack(value))[0]


def cell_to_float(value: int) -> float:
    """Reinterpret a cell's bit pattern as a 32-bit float."""
    return _FLOAT_STRUCT.unpack((value & 0xFFFFFFFF).to_bytes(4, "little"))[0]
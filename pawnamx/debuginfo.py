"""Reading the symbolic debug information appended to a compiled program."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import BinaryIO

from pawnamx.amx import AMX_MAGIC, AmxError, AmxException, AmxFlag, AmxHeader

DEBUG_MAGIC = 0xF1EF
"""Signature of the debug information chunk."""

_HEADER_STRUCT = struct.Struct("<IHBBHHHHHHH")
DEBUG_HEADER_SIZE = _HEADER_STRUCT.size
"""Size in bytes of the debug information header."""

_UCELL = struct.Struct("<I")
_SCELL = struct.Struct("<i")
_LINE = struct.Struct("<Ii")
_SYMBOL = struct.Struct("<IHIIbbH")
_SYMDIM = struct.Struct("<HI")
_TAG = struct.Struct("<H")
_MACHINE = struct.Struct("<HI")
_STATE = struct.Struct("<HH")

# The line count in the header is 16 bits wide and silently wraps around.
_LINES_WRAP = 0x10000


class Ident(enum.IntEnum):
    """Kinds of symbols in the symbol table."""

    VARIABLE = 1
    REFERENCE = 2
    ARRAY = 3
    REFARRAY = 4
    FUNCTN = 9


@dataclass(frozen=True)
class DebugHeader:
    """Header of the debug information chunk."""

    size: int
    magic: int
    file_version: int
    amx_version: int
    flags: int
    files: int
    lines: int
    symbols: int
    tags: int
    automatons: int
    states: int


@dataclass(frozen=True)
class DebugFile:
    """A source file and the code address where its generated code starts."""

    address: int
    name: str


@dataclass(frozen=True)
class DebugLine:
    """A source line and the code address where its generated code starts."""

    address: int
    line: int


@dataclass(frozen=True)
class SymbolDim:
    """One dimension of an array symbol."""

    tag: int
    size: int


@dataclass(frozen=True)
class DebugSymbol:
    """A function or variable with its scope in the code segment."""

    address: int
    tag: int
    codestart: int
    codeend: int
    ident: int
    vclass: int
    dim: int
    name: str
    dims: tuple[SymbolDim, ...] = ()


@dataclass(frozen=True)
class DebugTag:
    """A tag id and its name."""

    tag: int
    name: str


@dataclass(frozen=True)
class DebugAutomaton:
    """An automaton and the address of its state variable."""

    automaton: int
    address: int
    name: str


@dataclass(frozen=True)
class DebugState:
    """A state of an automaton."""

    state: int
    automaton: int
    name: str


class _Reader:
    def __init__(self, data: bytes, pos: int) -> None:
        self.data = data
        self.pos = pos

    def unpack(self, st: struct.Struct) -> tuple:
        try:
            values = st.unpack_from(self.data, self.pos)
        except struct.error:
            raise AmxException(
                AmxError.FORMAT, f"debug information truncated at offset {self.pos}"
            ) from None
        self.pos += st.size
        return values

    def cstring(self) -> str:
        end = self.data.find(b"\0", self.pos)
        if end < 0:
            raise AmxException(
                AmxError.FORMAT, f"unterminated name at offset {self.pos}"
            )
        raw = self.data[self.pos:end]
        self.pos = end + 1
        return raw.decode("utf-8", errors="replace")


def _count_lines(chunk: bytes, start: int, declared: int) -> int:
    """Work out the real number of line entries when the header count wrapped."""
    count = declared
    end = start + count * _LINE.size
    while (
        end + _SCELL.size <= len(chunk)
        and _SCELL.unpack_from(chunk, end)[0]
        > _SCELL.unpack_from(chunk, end - _LINE.size)[0]
    ):
        count += _LINES_WRAP
        end += _LINES_WRAP * _LINE.size
    return count


@dataclass(frozen=True)
class DebugInfo:
    """All tables of the debug information of one program."""

    header: DebugHeader
    files: tuple[DebugFile, ...]
    lines: tuple[DebugLine, ...]
    symbols: tuple[DebugSymbol, ...]
    tags: tuple[DebugTag, ...]
    automatons: tuple[DebugAutomaton, ...]
    states: tuple[DebugState, ...]

    @classmethod
    def load(cls, fp: BinaryIO) -> "DebugInfo":
        """Read the debug information from an open binary program file."""
        fp.seek(0)
        return cls.from_bytes(fp.read())

    @classmethod
    def from_bytes(cls, data: bytes) -> "DebugInfo":
        """Parse the debug information from the full contents of a program file."""
        amx = AmxHeader.from_bytes(data)
        if amx.magic != AMX_MAGIC:
            raise AmxException(AmxError.FORMAT, f"bad signature {amx.magic:#06x}")
        if not amx.flags & AmxFlag.DEBUG:
            raise AmxException(AmxError.DEBUG, "program has no debug information")
        if amx.size < 0:
            raise AmxException(AmxError.FORMAT, "negative program size in header")

        start = amx.size
        head = bytes(data[start:start + DEBUG_HEADER_SIZE])
        if len(head) < DEBUG_HEADER_SIZE:
            raise AmxException(AmxError.FORMAT, "debug header is missing")
        hdr = DebugHeader(*_HEADER_STRUCT.unpack(head))
        if hdr.magic != DEBUG_MAGIC:
            raise AmxException(
                AmxError.FORMAT, f"bad debug signature {hdr.magic:#06x}"
            )
        if hdr.size < DEBUG_HEADER_SIZE:
            raise AmxException(AmxError.FORMAT, "debug chunk smaller than its header")

        chunk = bytes(data[start:start + hdr.size])
        reader = _Reader(chunk, DEBUG_HEADER_SIZE)

        files = tuple(
            DebugFile(reader.unpack(_UCELL)[0], reader.cstring())
            for _ in range(hdr.files)
        )

        line_count = _count_lines(chunk, reader.pos, hdr.lines)
        lines = tuple(DebugLine(*reader.unpack(_LINE)) for _ in range(line_count))

        symbols = tuple(cls._read_symbol(reader) for _ in range(hdr.symbols))

        tags = tuple(
            DebugTag(reader.unpack(_TAG)[0], reader.cstring())
            for _ in range(hdr.tags)
        )
        automatons = tuple(
            DebugAutomaton(*reader.unpack(_MACHINE), reader.cstring())
            for _ in range(hdr.automatons)
        )
        states = tuple(
            DebugState(*reader.unpack(_STATE), reader.cstring())
            for _ in range(hdr.states)
        )
        return cls(hdr, files, lines, symbols, tags, automatons, states)

    @staticmethod
    def _read_symbol(reader: _Reader) -> DebugSymbol:
        address, tag, codestart, codeend, ident, vclass, dim = reader.unpack(_SYMBOL)
        name = reader.cstring()
        dims = tuple(SymbolDim(*reader.unpack(_SYMDIM)) for _ in range(dim))
        return DebugSymbol(
            address, tag, codestart, codeend, ident, vclass, dim, name, dims
        )
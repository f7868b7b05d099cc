"""Loading compiled programs from disk and inspecting their memory sections."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass

from pawnamx.amx import (
    AMX_MAGIC,
    HEADER_SIZE,
    AmxError,
    AmxException,
    AmxHeader,
)

_MESSAGES = (
    "(none)",
    "Forced exit",
    "Assertion failed",
    "Stack/heap collision (insufficient stack size)",
    "Array index out of bounds",
    "Invalid memory access",
    "Invalid instruction",
    "Stack underflow",
    "Heap underflow",
    "No (valid) native function callback",
    "Native function failed",
    "Divide by zero",
    "(sleep mode)",
    "Invalid state",
    "(reserved)",
    "(reserved)",
    "Out of memory",
    "Invalid/unsupported P-code file format",
    "File is for a newer version of the AMX",
    "File or function is not found",
    "Invalid index parameter (bad entry point)",
    "Debugger cannot run",
    "AMX not initialized (or doubly initialized)",
    "Unable to set user data field (table full)",
    "Cannot initialize the JIT",
    "Parameter error",
    "Domain error, expression result does not fit in range",
    "General error (unknown or unspecific error)",
    "Overlays are unsupported (JIT) or uninitialized",
)


class Section(enum.IntEnum):
    """Memory sections of a loaded program."""

    CODE = 0
    DATA = 1
    HEAP = 2
    STACK = 3


@dataclass(eq=False)
class AmxProgram:
    """A program image in memory together with its registers.

    Registers other than ``cip`` are offsets relative to the data section.
    """

    header: AmxHeader
    memory: bytearray
    cip: int = 0
    frm: int = 0
    hea: int = 0
    hlw: int = 0
    stk: int = 0
    stp: int = 0
    flags: int = 0
    error: int = 0
    pri: int = 0
    alt: int = 0
    reset_stk: int = 0
    reset_hea: int = 0

    def get_section(self, section: int) -> memoryview:
        """Return a writable view of one memory section."""
        try:
            section = Section(section)
        except ValueError:
            raise AmxException(AmxError.PARAMS, f"unknown section {section}") from None
        hdr = self.header
        view = memoryview(self.memory)
        if section is Section.CODE:
            return view[hdr.cod:hdr.dat]
        if section is Section.DATA:
            return view[hdr.dat:hdr.hea]
        if section is Section.HEAP:
            return view[hdr.dat + self.hlw:hdr.dat + self.hea]
        return view[hdr.dat + self.stk:hdr.dat + self.stp]


def _read_header(filename: str | os.PathLike) -> AmxHeader:
    with open(filename, "rb") as fp:
        return AmxHeader.from_bytes(fp.read(HEADER_SIZE))


def program_size(filename: str | os.PathLike) -> int:
    """Return the memory a program needs, or 0 if it is missing or not a program."""
    try:
        hdr = _read_header(filename)
    except (OSError, AmxException):
        return 0
    return hdr.stp if hdr.magic == AMX_MAGIC else 0


def load_program(filename: str | os.PathLike) -> AmxProgram:
    """Read a compiled program from disk and set up its registers."""
    try:
        with open(filename, "rb") as fp:
            image = fp.read()
    except OSError as exc:
        raise AmxException(AmxError.NOTFOUND, f"cannot open {filename}: {exc}") from exc

    hdr = AmxHeader.from_bytes(image)
    if hdr.magic != AMX_MAGIC:
        raise AmxException(AmxError.FORMAT, f"bad signature {hdr.magic:#06x}")
    if hdr.size < HEADER_SIZE or hdr.stp < hdr.size:
        raise AmxException(AmxError.FORMAT, "inconsistent program sizes in header")
    if not hdr.cod <= hdr.dat <= hdr.hea <= hdr.stp:
        raise AmxException(AmxError.FORMAT, "inconsistent section offsets in header")

    memory = bytearray(hdr.stp)
    body = image[:hdr.size]
    memory[:len(body)] = body

    hea = hdr.hea - hdr.dat
    stp = hdr.stp - hdr.dat
    return AmxProgram(
        header=hdr,
        memory=memory,
        cip=hdr.cip,
        hea=hea,
        hlw=hea,
        stk=stp,
        stp=stp,
        flags=hdr.flags,
        reset_stk=stp,
        reset_hea=hea,
    )


def str_error(errnum: int) -> str:
    """Return a readable message for an error code."""
    if 0 <= errnum < len(_MESSAGES):
        return _MESSAGES[errnum]
    return "(unknown)"
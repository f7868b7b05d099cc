"""Constants shared between a server host and its plugins."""

from __future__ import annotations

import enum

SAMP_PLUGIN_VERSION = 0x0200
"""Plugin interface version understood by the host."""


class SupportsFlags(enum.IntFlag):
    """Bits a plugin reports to describe what it supports."""

    VERSION = SAMP_PLUGIN_VERSION
    VERSION_MASK = 0xFFFF
    AMX_NATIVES = 0x10000


class PluginDataType(enum.IntEnum):
    """Indexes into the data table the host passes to a plugin on load."""

    LOGPRINTF = 0x00
    AMX_EXPORTS = 0x10
    CALLPUBLIC_FS = 0x11
    CALLPUBLIC_GM = 0x12


class PluginAmxExport(enum.IntEnum):
    """Positions of the abstract machine functions in the host's export table."""

    ALIGN16 = 0
    ALIGN32 = 1
    ALIGN64 = 2
    ALLOT = 3
    CALLBACK = 4
    CLEANUP = 5
    CLONE = 6
    EXEC = 7
    FIND_NATIVE = 8
    FIND_PUBLIC = 9
    FIND_PUB_VAR = 10
    FIND_TAG_ID = 11
    FLAGS = 12
    GET_ADDR = 13
    GET_NATIVE = 14
    GET_PUBLIC = 15
    GET_PUB_VAR = 16
    GET_STRING = 17
    GET_TAG = 18
    GET_USER_DATA = 19
    INIT = 20
    INIT_JIT = 21
    MEM_INFO = 22
    NAME_LENGTH = 23
    NATIVE_INFO = 24
    NUM_NATIVES = 25
    NUM_PUBLICS = 26
    NUM_PUB_VARS = 27
    NUM_TAGS = 28
    PUSH = 29
    PUSH_ARRAY = 30
    PUSH_STRING = 31
    RAISE_ERROR = 32
    REGISTER = 33
    RELEASE = 34
    SET_CALLBACK = 35
    SET_DEBUG_HOOK = 36
    SET_STRING = 37
    SET_USER_DATA = 38
    STR_LEN = 39
    UTF8_CHECK = 40
    UTF8_GET = 41
    UTF8_LEN = 42
    UTF8_PUT = 43


def supports_flags(natives: bool) -> int:
    """Return the value a plugin reports from its Supports() entry point."""
    flags = SupportsFlags.VERSION
    if natives:
        flags |= SupportsFlags.AMX_NATIVES
    return int(flags)
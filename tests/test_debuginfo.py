import io
import struct

import pytest

from pawnamx.amx import HEADER_SIZE, AmxError, AmxException, AmxFlag, AmxHeader
from pawnamx.debuginfo import (
    DEBUG_HEADER_SIZE,
    DEBUG_MAGIC,
    DebugAutomaton,
    DebugFile,
    DebugInfo,
    DebugLine,
    DebugState,
    DebugTag,
    Ident,
    SymbolDim,
)


def _cstr(text):
    return text.encode() + b"\0"


def _build(
    files=(),
    lines=(),
    symbols=(),
    tags=(),
    automatons=(),
    states=(),
    lines_field=None,
    magic=DEBUG_MAGIC,
    amx_flags=AmxFlag.DEBUG,
):
    body = b"".join(struct.pack("<I", a) + _cstr(n) for a, n in files)
    body += b"".join(struct.pack("<Ii", a, n) for a, n in lines)
    for addr, tag, cs, ce, ident, vclass, name, dims in symbols:
        body += struct.pack("<IHIIbbH", addr, tag, cs, ce, ident, vclass, len(dims))
        body += _cstr(name)
        body += b"".join(struct.pack("<HI", t, s) for t, s in dims)
    body += b"".join(struct.pack("<H", t) + _cstr(n) for t, n in tags)
    body += b"".join(struct.pack("<HI", a, ad) + _cstr(n) for a, ad, n in automatons)
    body += b"".join(struct.pack("<HH", s, a) + _cstr(n) for s, a, n in states)
    header = struct.pack(
        "<IHBBHHHHHHH",
        DEBUG_HEADER_SIZE + len(body),
        magic,
        8,
        8,
        0,
        len(files),
        len(lines) if lines_field is None else lines_field,
        len(symbols),
        len(tags),
        len(automatons),
        len(states),
    )
    amx = AmxHeader(size=HEADER_SIZE, flags=int(amx_flags)).to_bytes()
    return amx + header + body


FILES = [(0x0, "main.pwn"), (0x40, "util.inc")]
LINES = [(0x8, 3), (0x10, 4), (0x40, 10), (0x100, 12)]
SYMBOLS = [
    (0x8, 0, 0x8, 0x40, int(Ident.FUNCTN), 0, "main", []),
    (0x4, 1, 0x8, 0x40, int(Ident.ARRAY), 1, "grid", [(0, 3), (1, 5)]),
]
TAGS = [(0, "_"), (1, "Float")]
AUTOMATONS = [(1, 0x20, "machine")]
STATES = [(0, 1, "idle")]


def _sample():
    return _build(FILES, LINES, SYMBOLS, TAGS, AUTOMATONS, STATES)


def test_parses_all_tables():
    info = DebugInfo.from_bytes(_sample())
    assert info.header.magic == DEBUG_MAGIC
    assert info.files == tuple(DebugFile(a, n) for a, n in FILES)
    assert info.lines == tuple(DebugLine(a, n) for a, n in LINES)
    assert info.tags == tuple(DebugTag(t, n) for t, n in TAGS)
    assert info.automatons == tuple(DebugAutomaton(*a) for a in AUTOMATONS)
    assert info.states == tuple(DebugState(*s) for s in STATES)


def test_symbols_and_dimensions():
    info = DebugInfo.from_bytes(_sample())
    main, grid = info.symbols
    assert main.name == "main"
    assert main.ident == Ident.FUNCTN
    assert (main.codestart, main.codeend) == (0x8, 0x40)
    assert main.dims == ()
    assert grid.ident == Ident.ARRAY
    assert grid.dim == 2
    assert grid.dims == (SymbolDim(0, 3), SymbolDim(1, 5))


def test_header_counts_match_tables():
    info = DebugInfo.from_bytes(_sample())
    hdr = info.header
    assert hdr.files == len(info.files)
    assert hdr.lines == len(info.lines)
    assert hdr.symbols == len(info.symbols)
    assert hdr.tags == len(info.tags)
    assert hdr.automatons == len(info.automatons)
    assert hdr.states == len(info.states)


def test_load_from_file_matches_from_bytes(tmp_path):
    path = tmp_path / "prog.amx"
    path.write_bytes(_sample())
    with open(path, "rb") as fp:
        fp.read(5)
        info = DebugInfo.load(fp)
    assert info == DebugInfo.from_bytes(_sample())


def test_load_from_stream():
    info = DebugInfo.load(io.BytesIO(_sample()))
    assert [f.name for f in info.files] == ["main.pwn", "util.inc"]


def test_empty_tables():
    info = DebugInfo.from_bytes(_build())
    assert info.files == ()
    assert info.lines == ()
    assert info.symbols == ()
    assert info.header.size == DEBUG_HEADER_SIZE


def test_bad_program_signature():
    data = bytearray(_sample())
    struct.pack_into("<H", data, 4, 0x1234)
    with pytest.raises(AmxException) as exc:
        DebugInfo.from_bytes(bytes(data))
    assert exc.value.error == AmxError.FORMAT


def test_missing_debug_flag():
    with pytest.raises(AmxException) as exc:
        DebugInfo.from_bytes(_build(FILES, LINES, amx_flags=AmxFlag(0)))
    assert exc.value.error == AmxError.DEBUG


def test_bad_debug_signature():
    with pytest.raises(AmxException) as exc:
        DebugInfo.from_bytes(_build(FILES, LINES, magic=0x1234))
    assert exc.value.error == AmxError.FORMAT


def test_missing_debug_header():
    data = AmxHeader(size=HEADER_SIZE, flags=int(AmxFlag.DEBUG)).to_bytes()
    with pytest.raises(AmxException) as exc:
        DebugInfo.from_bytes(data)
    assert exc.value.error == AmxError.FORMAT


def test_truncated_name():
    with pytest.raises(AmxException) as exc:
        DebugInfo.from_bytes(_sample()[:-3])
    assert exc.value.error == AmxError.FORMAT


def test_short_program_header():
    with pytest.raises(AmxException) as exc:
        DebugInfo.from_bytes(b"\x00" * 10)
    assert exc.value.error == AmxError.FORMAT


def test_wrapped_line_count_is_recovered():
    count = 0x10000 + 2
    lines = [(i * 4, i) for i in range(count)]
    symbols = [(0x0, 0, 0x0, 0x8, int(Ident.FUNCTN), 0, "start", [])]
    data = _build(FILES, lines, symbols, lines_field=count & 0xFFFF)
    info = DebugInfo.from_bytes(data)
    assert info.header.lines == count & 0xFFFF
    assert len(info.lines) == count
    assert info.lines[-1] == DebugLine((count - 1) * 4, count - 1)
    assert info.symbols[0].name == "start"
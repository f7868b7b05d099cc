"""Queries on loaded debug information: files, lines, functions and symbols."""

from __future__ import annotations

from pawnamx.amx import AmxError, AmxException
from pawnamx.debuginfo import DebugInfo, DebugSymbol, Ident, SymbolDim

_UCELL_MAX = 0xFFFFFFFF


def _not_found(what: str) -> AmxException:
    return AmxException(AmxError.NOTFOUND, what)


def lookup_file(info: DebugInfo, address: int) -> str:
    """Return the name of the source file that holds a code address."""
    found = None
    for entry in info.files:
        if entry.address > address:
            break
        found = entry
    if found is None:
        raise _not_found(f"no file for address {address:#x}")
    return found.name


def lookup_line(info: DebugInfo, address: int) -> int:
    """Return the source line number that holds a code address."""
    found = None
    for entry in info.lines:
        if entry.address > address:
            break
        found = entry
    if found is None:
        raise _not_found(f"no line for address {address:#x}")
    return found.line


def _first_function(info: DebugInfo, matches) -> str:
    for sym in info.symbols:
        if sym.ident == Ident.FUNCTN and matches(sym) and not sym.name.startswith("@"):
            return sym.name
    raise _not_found("no matching function")


def lookup_function(info: DebugInfo, address: int) -> str:
    """Return the name of the function whose code range contains an address."""
    return _first_function(info, lambda s: s.codestart <= address < s.codeend)


def lookup_function_exact(info: DebugInfo, address: int) -> str:
    """Return the name of the function that starts exactly at an address."""
    return _first_function(info, lambda s: s.codestart == address)


def tag_name(info: DebugInfo, tag: int) -> str:
    """Return the name of a tag id."""
    for entry in info.tags:
        if entry.tag == tag:
            return entry.name
    raise _not_found(f"no tag {tag}")


def automaton_name(info: DebugInfo, automaton: int) -> str:
    """Return the name of an automaton id."""
    for entry in info.automatons:
        if entry.automaton == automaton:
            return entry.name
    raise _not_found(f"no automaton {automaton}")


def state_name(info: DebugInfo, state: int) -> str:
    """Return the name of a state id."""
    for entry in info.states:
        if entry.state == state:
            return entry.name
    raise _not_found(f"no state {state}")


def line_address(info: DebugInfo, line: int, filename: str) -> int:
    """Return a breakpoint address at or just after ``line`` in ``filename``.

    A file may appear several times in the file table; each instance is tried.
    """
    lines = info.lines
    count = len(lines)
    index = 0
    for number, entry in enumerate(info.files):
        if entry.name != filename:
            continue
        bottom = entry.address
        if number + 1 < len(info.files):
            top = info.files[number + 1].address
        else:
            top = _UCELL_MAX
        while index < count and lines[index].address < bottom:
            index += 1
        while index < count and lines[index].line < line and lines[index].address < top:
            index += 1
        if index >= count:
            raise _not_found(f"line {line} not found in {filename}")
        if lines[index].line >= line:
            return lines[index].address
    raise _not_found(f"line {line} not found in {filename}")


def function_address(info: DebugInfo, funcname: str, filename: str) -> int:
    """Return the first breakable address of a function."""
    funcaddr = None
    for sym in info.symbols:
        if sym.ident != Ident.FUNCTN or sym.name != funcname:
            continue
        # A symbol is accepted as soon as its file resolves.
        try:
            lookup_file(info, sym.address)
        except AmxException:
            continue
        funcaddr = sym.address
        break
    if funcaddr is None:
        raise _not_found(f"function {funcname} not found in {filename}")
    for entry in info.lines:
        if entry.address >= funcaddr:
            return entry.address
    raise _not_found(f"no breakable line in {funcname}")


def variable(info: DebugInfo, symname: str, scopeaddr: int) -> DebugSymbol:
    """Return the symbol named ``symname`` with the narrowest scope."""
    best: DebugSymbol | None = None
    codestart = codeend = 0
    for sym in info.symbols:
        candidate = sym.ident != Ident.FUNCTN and sym.name == symname
        in_scope = sym.codestart <= scopeaddr <= sym.codeend
        if not candidate and not in_scope:
            continue
        if sym.name == symname and (
            (codestart == 0 and codeend == 0)
            or (sym.codestart >= codestart and sym.codeend <= codeend)
        ):
            best = sym
            codestart, codeend = sym.codestart, sym.codeend
    if best is None:
        raise _not_found(f"variable {symname} not found")
    return best


def array_dims(info: DebugInfo, sym: DebugSymbol) -> tuple[SymbolDim, ...]:
    """Return the dimensions of an array symbol."""
    if sym.ident not in (Ident.ARRAY, Ident.REFARRAY):
        raise AmxException(AmxError.PARAMS, f"{sym.name} is not an array")
    return sym.dims
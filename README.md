# pawnamx

Tools for inspecting compiled Pawn programs (`.amx` files): parse the
program header, load a program image and view its memory sections, find
which file on disk a loaded program came from, and read the symbolic debug
information that is appended to a program built with debugging enabled.

## Installation

```
pip install pawnamx
```

To run the test suite:

```
pip install "pawnamx[test]"
pytest
```

## Modules

- `pawnamx.amx` – the program header `AmxHeader` (`from_bytes`,
  `to_bytes`), error codes `AmxError`, the exception `AmxException` (its
  `error` attribute holds the code), header flags `AmxFlag`, and the helpers
  `amx_user_tag` (four characters to a user-data tag), `float_to_cell` and
  `cell_to_float` (reinterpret the bits of a 32-bit float as a cell and
  back).
- `pawnamx.auxiliary` – `load_program(filename)` reads a program into an
  `AmxProgram` and sets up its registers; `program_size(filename)` returns
  the memory a program needs, or 0 if the file is missing or not a program;
  `str_error(errnum)` turns an error code into a readable message;
  `AmxProgram.get_section(section)` returns a writable `memoryview` of the
  code, data, heap or stack section (see `Section`).
- `pawnamx.plugin` – the plugin interface constants `PluginAmxExport`,
  `PluginDataType`, `SupportsFlags`, and `supports_flags(natives)`, which
  gives the value a plugin reports as its supported features.
- `pawnamx.handler` – `AmxHandler`, a base class that keeps one handler
  object per program, with `create_handler`, `get_handler` and
  `destroy_handler`. Each subclass has its own registry.
- `pawnamx.pathfinder` – `AmxPathFinder`: add directories with
  `add_search_path`, or record a path directly with `add_known_file`;
  `find(program)` scans the directories for `.amx` files, loads them
  (reloading those whose modification time changed) and returns the path
  of the one whose header matches, or `None`.
- `pawnamx.debuginfo` – `DebugInfo.load(fp)` and `DebugInfo.from_bytes(data)`
  parse the debug tables: files, lines, symbols (with array dimensions),
  tags, automatons and states.
- `pawnamx.debuglookup` – queries over a `DebugInfo`: `lookup_file`,
  `lookup_line`, `lookup_function`, `lookup_function_exact`, `tag_name`,
  `automaton_name`, `state_name`, `line_address`, `function_address`,
  `variable` and `array_dims`.

## Example

```python
from pawnamx.debuginfo import DebugInfo
from pawnamx.debuglookup import lookup_file, lookup_function, lookup_line

with open("gamemode.amx", "rb") as fp:
    info = DebugInfo.load(fp)

address = 0x120
print(lookup_file(info, address), lookup_line(info, address),
      lookup_function(info, address))
```

## Errors

Failures raise `AmxException` with an `AmxError` code: lookups that find
nothing use `AmxError.NOTFOUND`; `load_program` uses `NOTFOUND` for a file
that cannot be opened and `FORMAT` for one that is not a valid program;
`DebugInfo` uses `DEBUG` for a program without debug information and
`FORMAT` for malformed tables; `get_section` and `array_dims` use `PARAMS`
for an unknown section or a symbol that is not an array.

## What it does not do

The package reads and inspects programs; it does not execute them. There
is no interpreter for the abstract machine's instructions, no native
function registration and no debugger front end or command-line tool.
import os

import pytest

from pawnamx.amx import HEADER_SIZE, AmxHeader
from pawnamx.auxiliary import load_program
from pawnamx.pathfinder import AmxPathFinder


def _image(cip):
    cod = HEADER_SIZE
    dat = cod + 8
    hea = dat + 4
    hdr = AmxHeader(size=hea, cod=cod, dat=dat, hea=hea, stp=hea + 32, cip=cip)
    return hdr.to_bytes() + bytes(8) + b"data"


@pytest.fixture
def scripts(tmp_path):
    (tmp_path / "a.amx").write_bytes(_image(cip=1))
    (tmp_path / "b.amx").write_bytes(_image(cip=2))
    return tmp_path


def _path(directory, name):
    return str(directory) + os.sep + name


def test_find_matches_file_in_search_path(scripts, tmp_path):
    other = tmp_path / "elsewhere"
    other.mkdir()
    (other / "copy.amx").write_bytes(_image(cip=2))
    program = load_program(other / "copy.amx")
    finder = AmxPathFinder()
    finder.add_search_path(scripts)
    assert finder.find(program) == _path(scripts, "b.amx")


def test_known_file_takes_precedence(scripts):
    program = load_program(scripts / "a.amx")
    finder = AmxPathFinder()
    finder.add_search_path(scripts)
    finder.add_known_file(program, "custom/place.amx")
    assert finder.find(program) == "custom/place.amx"


def test_not_found_returns_none(scripts, tmp_path):
    (tmp_path / "lone.bin").write_bytes(_image(cip=3))
    program = load_program(tmp_path / "lone.bin")
    finder = AmxPathFinder()
    finder.add_search_path(scripts)
    assert finder.find(program) is None


def test_only_amx_files_are_considered(tmp_path):
    (tmp_path / "script.txt").write_bytes(_image(cip=1))
    program = load_program(tmp_path / "script.txt")
    finder = AmxPathFinder()
    finder.add_search_path(tmp_path)
    assert finder.find(program) is None


def test_result_is_cached(scripts):
    program = load_program(scripts / "a.amx")
    finder = AmxPathFinder()
    finder.add_search_path(scripts)
    expected = _path(scripts, "a.amx")
    assert finder.find(program) == expected
    (scripts / "a.amx").unlink()
    assert finder.find(program) == expected


def test_newer_file_is_reloaded(scripts, tmp_path):
    finder = AmxPathFinder()
    finder.add_search_path(scripts)
    first = load_program(scripts / "a.amx")
    assert finder.find(first) == _path(scripts, "a.amx")

    replacement = _image(cip=7)
    (scripts / "a.amx").write_bytes(replacement)
    stat = os.stat(scripts / "a.amx")
    os.utime(scripts / "a.amx", (stat.st_atime, stat.st_mtime + 10))

    (tmp_path / "new.bin").write_bytes(replacement)
    second = load_program(tmp_path / "new.bin")
    assert finder.find(second) == _path(scripts, "a.amx")


def test_missing_search_path(tmp_path):
    (tmp_path / "x.bin").write_bytes(_image(cip=1))
    program = load_program(tmp_path / "x.bin")
    finder = AmxPathFinder()
    finder.add_search_path(tmp_path / "does-not-exist")
    assert finder.find(program) is None
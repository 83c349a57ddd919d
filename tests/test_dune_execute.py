import subprocess
from pathlib import Path

from dxtci.core.testing.execute import build_command, call, gtest_output_arg, parse_ini_file

INI = """\
__inifile_optionkey = --ini-file
threads = 4

[grids]
dim = 2

[grids.alu]
refinements = 3
"""


def _ini(tmp_path: Path, text: str = INI) -> Path:
    p = tmp_path / "test_laplace.ini"
    p.write_text(text, encoding="utf-8")
    return p


def test_parse_ini_flattens_sections(tmp_path: Path):
    info = parse_ini_file(_ini(tmp_path))
    assert info == {
        "__inifile_optionkey": "--ini-file",
        "threads": "4",
        "grids.dim": "2",
        "grids.alu.refinements": "3",
    }


def test_build_command_with_optionkey(tmp_path: Path):
    ini = str(_ini(tmp_path))
    assert build_command("test_laplace", ini, "--x") == ["./test_laplace", "--ini-file", ini, "--x"]


def test_build_command_without_optionkey(tmp_path: Path):
    ini = str(_ini(tmp_path, "threads = 1\n"))
    assert build_command("test_laplace", ini) == ["./test_laplace", ini]


def test_build_command_without_ini():
    assert build_command("test_la", None, "-v") == ["./test_la", "-v"]


def test_gtest_output_arg():
    assert gtest_output_arg("bin/test_laplace", "inis/2d.ini") == "--gtest_output=xml:test_laplace_2d.xml"
    assert gtest_output_arg("test_la", None) == "--gtest_output=xml:test_la.xml"


def test_call_returns_exit_code(tmp_path: Path, monkeypatch):
    seen = []

    def fake_call(cmd):
        seen.append(cmd)
        return 7

    monkeypatch.setattr(subprocess, "call", fake_call)
    assert call("test_la", None, "--gtest_output=xml:test_la.xml") == 7
    assert seen == [["./test_la", "--gtest_output=xml:test_la.xml"]]

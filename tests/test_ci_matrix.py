import json
from pathlib import Path

import pytest

from dxtci.core.ci.matrix import BuildMatrix, job_name, load_matrix, slug
from dxtci.core.errors import ConfigError


def test_default_matrix_axes():
    m = BuildMatrix()
    assert m.module == "dune-xt"
    assert m.compiler_tuples() == [("gcc", "g++"), ("clang", "clang++")]
    assert m.images == ["debian"]
    assert m.kinds == ["cpp", "headercheck"]
    assert m.pythons == ["3.7", "3.8", "3.9"]
    assert m.wheel_steps == ["xt", "gdt", "all"]


def test_jobs_are_the_full_cartesian_product():
    m = BuildMatrix()
    jobs = m.jobs()
    assert len(jobs) == 2 * 1 * 7 * 2
    assert jobs[0] == (("gcc", "g++"), "debian", "xt/common", "cpp")
    assert len(set(jobs)) == len(jobs)


def test_compiler_images_product():
    m = BuildMatrix(images=["debian", "debian-unstable"])
    assert m.compiler_images() == [
        (("gcc", "g++"), "debian"),
        (("gcc", "g++"), "debian-unstable"),
        (("clang", "clang++"), "debian"),
        (("clang", "clang++"), "debian-unstable"),
    ]


def test_compilers_accept_pairs_and_drop_duplicates():
    m = BuildMatrix.from_mapping({"compilers": [["gcc", "g++"], {"cc": "gcc", "cxx": "g++"}, ["icc", "icpc"]]})
    assert m.compiler_tuples() == [("gcc", "g++"), ("icc", "icpc")]


def test_empty_axis_is_rejected():
    with pytest.raises(ConfigError):
        BuildMatrix.from_mapping({"subdirs": []})


def test_wheel_steps_do_not_alias_field():
    m = BuildMatrix()
    steps = m.wheel_steps
    steps.append("bogus")
    assert m.wheel_steps_no_all == ["xt", "gdt"]


def test_load_matrix_from_yaml_with_override(tmp_path: Path):
    p = tmp_path / "matrix.yml"
    p.write_text("module: dune-xt\nimages: [arch]\nkinds: [cpp]\n", encoding="utf-8")
    m = load_matrix(p, module="dune-gdt")
    assert m.module == "dune-gdt"
    assert m.images == ["arch"]
    assert m.kinds == ["cpp"]


def test_load_matrix_from_env_json(tmp_path: Path, monkeypatch):
    p = tmp_path / "matrix.json"
    p.write_text(json.dumps({"subdirs": ["gdt"]}), encoding="utf-8")
    monkeypatch.setenv("DXTCI_MATRIX_FILE", str(p))
    assert load_matrix().subdirs == ["gdt"]


def test_load_matrix_missing_file(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_matrix(tmp_path / "nope.yml")


def test_load_matrix_rejects_non_mapping(tmp_path: Path):
    p = tmp_path / "matrix.yml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_matrix(p)


def test_slug_and_job_name():
    assert slug("xt/functions") == "xt_functions"
    assert job_name("gcc", "debian", "xt/la", "cpp") == "debian gcc xt_la cpp"

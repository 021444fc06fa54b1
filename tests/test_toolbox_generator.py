from pathlib import Path

import pytest

from wrapgen import (
    CantOpenFile, DependencyMissing, InterfaceParser, MatlabGenerator, ToolboxGenerator, load_module,
)


@pytest.fixture
def geometry(samples_dir):
    return load_module(samples_dir, "geometry")


def test_toolbox_layout(geometry, tmp_path):
    ToolboxGenerator(geometry).generate(tmp_path, "gtsam", "mexmaci64", "-O")

    expected = [
        "make_geometry.m",
        "Makefile",
        "@Point2/Point2.m",
        "@Point2/x.m",
        "@Point2/x.cpp",
        "@Point2/dist.cpp",
        "new_Point2_.m",
        "new_Point2_dd.cpp",
        "Point2_Expmap.cpp",
        "@geometry_Rot2/geometry_Rot2.m",
        "@geometry_Rot2/theta.cpp",
        "geometry_Rot2_fromAngle.cpp",
        "new_geometry_Rot2_d.cpp",
        "@geometry_Pose2/geometry_Pose2.m",
        "@geometry_Pose2/logmap.cpp",
        "new_geometry_Pose2_ddd.cpp",
        "new_geometry_Pose2_RP.cpp",
    ]
    for name in expected:
        assert (tmp_path / name).is_file(), name


def test_makefile_targets_follow_declaration_order(geometry, tmp_path):
    ToolboxGenerator(geometry).generate(tmp_path, mex_ext="mexa64")

    lines = (tmp_path / "Makefile").read_text().splitlines()

    assert "MEXENDING = mexa64" in lines
    assert "all: Point2 geometry_Rot2 geometry_Pose2" in lines

    clean = lines[lines.index("clean:") + 1:]
    assert clean == [
        "\trm -rf *.$(MEXENDING)",
        "\trm -rf @Point2/*.$(MEXENDING)",
        "\trm -rf @geometry_Rot2/*.$(MEXENDING)",
        "\trm -rf @geometry_Pose2/*.$(MEXENDING)",
    ]

    sections = [line for line in lines if line.startswith("# ") and "generated" not in line]
    assert sections == ["# Point2", "# geometry_Rot2", "# geometry_Pose2"]


def test_make_script(geometry, tmp_path):
    ToolboxGenerator(geometry).generate(tmp_path, mex_flags="-O")

    script = (tmp_path / "make_geometry.m").read_text()
    lines = script.splitlines()

    assert lines[1] == "echo on"
    assert "addpath(toolboxpath);" in lines
    assert [line for line in lines if line.startswith("%%")] == [
        "%% Point2", "%% geometry_Rot2", "%% geometry_Pose2",
    ]
    assert "mex -O new_geometry_Pose2_RP.cpp" in lines
    assert "cd @geometry_Pose2" in lines
    assert lines[-1] == "echo off"


def test_glue_uses_namespace(geometry, tmp_path):
    ToolboxGenerator(geometry).generate(tmp_path, namespace="gtsam")

    cpp = (tmp_path / "@geometry_Pose2" / "rotation.cpp").read_text()
    assert "using namespace gtsam;" in cpp
    assert "#include <geometry/Pose2.h>" in cpp
    assert "geometry::Rot2 result = self->rotation();" in cpp


def test_missing_dependency_keeps_earlier_output(tmp_path):
    module = InterfaceParser("""
        class A { A(); double f() const; };
        class B { B(const Missing& m); };
        class C { C(); };
    """, "partial").parse()

    with pytest.raises(DependencyMissing) as excinfo:
        ToolboxGenerator(module).generate(tmp_path)

    assert excinfo.value.type_name == "Missing"
    assert excinfo.value.member_name == "B"

    # Nothing is rolled back: A is complete, B only has its proxy, C was never reached
    assert (tmp_path / "@A" / "A.m").is_file()
    assert (tmp_path / "@A" / "f.cpp").is_file()
    assert (tmp_path / "new_A_.cpp").is_file()
    assert (tmp_path / "@B" / "B.m").is_file()
    assert not (tmp_path / "new_B_M.cpp").exists()
    assert not (tmp_path / "@C").exists()

    # Aggregate files were closed with what had been written so far
    makefile = (tmp_path / "Makefile").read_text()
    assert "all: A B C" in makefile
    assert "# A" in makefile
    assert "# B" not in makefile
    assert "clean:" not in makefile
    make_script = (tmp_path / "make_partial.m").read_text()
    assert "%% A" in make_script
    assert "echo off" not in make_script


def test_unwritable_toolbox_path(geometry, tmp_path):
    target = tmp_path / "toolbox"
    target.write_text("not a directory")

    with pytest.raises(CantOpenFile):
        ToolboxGenerator(geometry).generate(target)


def test_unopenable_makefile(geometry, tmp_path):
    (tmp_path / "Makefile").mkdir()

    with pytest.raises(CantOpenFile) as excinfo:
        ToolboxGenerator(geometry).generate(tmp_path)

    assert excinfo.value.path.endswith("Makefile")
    assert not (tmp_path / "@Point2").exists()


def test_verbose_reports_generated_files(tmp_path, capsys):
    module = InterfaceParser("class A { A(); };", "verbose", verbose=True).parse()

    ToolboxGenerator(module).generate(tmp_path)

    out = capsys.readouterr().out
    assert f"Generating: {tmp_path / 'Makefile'}" in out
    assert f"Generated: {tmp_path / '@A' / 'A.m'}" in out


def test_empty_module(tmp_path):
    module = InterfaceParser("", "empty").parse()

    ToolboxGenerator(module).generate(tmp_path)

    lines = (tmp_path / "Makefile").read_text().splitlines()
    assert "all:" in lines
    assert lines[-1] == "\trm -rf *.$(MEXENDING)"


full_device = pytest.mark.skipif(not Path("/dev/full").exists(), reason="needs /dev/full")


@full_device
def test_failed_makefile_write_raises_cant_open_file(geometry, tmp_path):
    (tmp_path / "Makefile").symlink_to("/dev/full")

    with pytest.raises(CantOpenFile) as excinfo:
        ToolboxGenerator(geometry).generate(tmp_path)

    assert excinfo.value.path.endswith("Makefile")
    assert isinstance(excinfo.value.__cause__, OSError)


@full_device
def test_failed_make_script_write_raises_cant_open_file(geometry, tmp_path):
    (tmp_path / "make_geometry.m").symlink_to("/dev/full")

    with pytest.raises(CantOpenFile) as excinfo:
        ToolboxGenerator(geometry).generate(tmp_path)

    assert excinfo.value.path.endswith("make_geometry.m")


class TaggedGenerator(MatlabGenerator):
    def generate_proxy(self, cls):
        return f"% tagged {self.namespace}\n" + super().generate_proxy(cls)


def test_emitter_class_is_injectable(tmp_path):
    module = InterfaceParser("class A { A(); };", "tagged").parse()

    ToolboxGenerator(module, emitter_class=TaggedGenerator).generate(tmp_path, namespace="gtsam")

    proxy = (tmp_path / "@A" / "A.m").read_text()
    assert proxy.startswith("% tagged gtsam\n")
    assert "classdef A" in proxy

"""
Tests related to the command line interface
"""
import os
from unittest import mock

import pytest
from click.testing import CliRunner

from mocha.package.errors import ProcessExitError
from mocha.scripts.cli import cli, ErrorCode
from mocha.scripts.version import version
from mocha.utils.settings import Settings

MANIFEST = """
source: https://github.com/facebook/zstd
dependencies: []
features: [zstd]
artifacts:
  - Bin: {name: zstd}
  - Sym: {name: unzstd, points_to: zstd}
beta_artifacts:
  - ["lib zstd", ["lib/common/debug.c"]]
  - ["bin zstdcli", ["programs/zstdcli.c"]]
"""


@pytest.fixture
def manifest(tmp_path) -> str:
    path = os.path.join(str(tmp_path), "zstd.yaml")
    with open(path, "w") as f:
        f.write(MANIFEST)
    return path


def test_version():
    result = CliRunner().invoke(cli, ["version"])
    assert result.exit_code == 0
    assert result.output == version + "\n"


def test_show(manifest):
    result = CliRunner().invoke(cli, ["show", manifest])
    assert result.exit_code == 0
    assert result.output.startswith("# package zstd\n")
    assert "points_to: zstd" in result.output


def test_show_invalid_manifest(tmp_path):
    path = os.path.join(str(tmp_path), "broken.yaml")
    with open(path, "w") as f:
        f.write("source: [")
    result = CliRunner().invoke(cli, ["show", path])
    assert result.exit_code == ErrorCode.PROGRAM_ERROR.value


def test_build_script(manifest):
    result = CliRunner().invoke(cli, ["build_script", manifest])
    assert result.exit_code == 0
    assert result.output.startswith('const std = @import("std");')
    assert "const libzstd = b.addStaticLibrary(.{" in result.output
    assert 'zstdcli.addObjectFile("zig-out/lib/libzstd.a");' in result.output


def test_build_script_with_other_compression_lib(manifest):
    result = CliRunner().invoke(cli, ["build_script", "--secondary_compression_lib", "libz.a", manifest])
    assert result.exit_code == 0
    assert 'zstdcli.addObjectFile("libz.a");' in result.output


def test_install(manifest, tmp_path):
    root = os.path.join(str(tmp_path), "root")

    def build(cmd, cwd):
        if cmd[0] == "cargo":
            target_dir = os.path.join(cwd, "target", "x86_64-unknown-linux-musl", "release")
            os.makedirs(target_dir)
            with open(os.path.join(target_dir, "zstd"), "w") as f:
                f.write("binary")

    with mock.patch("mocha.utils.vcs.exec_command"), \
            mock.patch("mocha.build.builder.exec_command", side_effect=build):
        result = CliRunner().invoke(cli, ["install", "--root_dir", root, manifest])
    assert result.exit_code == 0
    assert "unzstd" in result.output
    assert os.path.isfile(os.path.join(root, "bin", "zstd"))
    assert os.readlink(os.path.join(root, "bin", "unzstd")) == "zstd"


def test_install_with_failing_build(manifest, tmp_path):
    root = os.path.join(str(tmp_path), "root")
    error = ProcessExitError(["zig", "build"], root, 1)
    with mock.patch("mocha.utils.vcs.exec_command"), \
            mock.patch("mocha.build.builder.exec_command", side_effect=error):
        result = CliRunner().invoke(cli, ["install", "--root_dir", root, manifest])
    assert result.exit_code == ErrorCode.PROGRAM_ERROR.value
    assert os.listdir(os.path.join(root, "bin")) == []


def test_install_without_manifests():
    assert CliRunner().invoke(cli, ["install"]).exit_code != 0


def test_invalid_option_value(manifest):
    result = CliRunner().invoke(cli, ["install", "--sync_depth", "0", manifest])
    assert result.exit_code == ErrorCode.MOCHA_ERROR.value


def test_init_settings(tmp_path):
    path = os.path.join(str(tmp_path), "mocha.yaml")
    result = CliRunner().invoke(cli, ["init", "settings", "--root_dir", "/opt/mocha", path])
    assert result.exit_code == 0
    Settings().reset()
    Settings().load_file(path)
    assert Settings()["root_dir"] == "/opt/mocha"

"""
Tests related to the installation of built artifacts
"""
import os

import pytest

from mocha.build.installer import ArtifactInstaller
from mocha.package.errors import FileSystemError
from mocha.package.spec import Bin, Sym


@pytest.fixture
def dirs(tmp_path):
    target_dir = os.path.join(str(tmp_path), "target")
    binary_dir = os.path.join(str(tmp_path), "bin")
    os.mkdir(target_dir)
    os.mkdir(binary_dir)
    for name in ["zstd", "zstdcat"]:
        with open(os.path.join(target_dir, name), "w") as f:
            f.write(name)
    return target_dir, binary_dir


def read(path: str) -> str:
    with open(path) as f:
        return f.read()


def test_install_bin(dirs):
    target_dir, binary_dir = dirs
    ArtifactInstaller(target_dir, binary_dir).install([Bin("zstd")])
    assert read(os.path.join(binary_dir, "zstd")) == "zstd"


def test_install_renamed_bin(dirs):
    target_dir, binary_dir = dirs
    ArtifactInstaller(target_dir, binary_dir).install([Bin("zstdcat", "zcat")])
    assert read(os.path.join(binary_dir, "zcat")) == "zstdcat"
    assert not os.path.exists(os.path.join(binary_dir, "zstdcat"))


def test_install_sym(dirs):
    target_dir, binary_dir = dirs
    ArtifactInstaller(target_dir, binary_dir).install([Bin("zstd"), Sym("unzstd", "zstd")])
    link = os.path.join(binary_dir, "unzstd")
    assert os.path.islink(link)
    assert os.readlink(link) == "zstd"
    assert read(link) == "zstd"


def test_sym_target_is_stored_as_is(dirs):
    target_dir, binary_dir = dirs
    ArtifactInstaller(target_dir, binary_dir).install([Sym("cc", "gcc")])
    assert os.readlink(os.path.join(binary_dir, "cc")) == "gcc"


def test_reinstall_replaces(dirs):
    target_dir, binary_dir = dirs
    installer = ArtifactInstaller(target_dir, binary_dir)
    with open(os.path.join(binary_dir, "zstd"), "w") as f:
        f.write("old")
    installer.install([Bin("zstd"), Sym("unzstd", "zstd")])
    installer.install([Bin("zstd"), Sym("unzstd", "zstd")])
    assert read(os.path.join(binary_dir, "zstd")) == "zstd"
    assert os.readlink(os.path.join(binary_dir, "unzstd")) == "zstd"


def test_missing_bin_stops(dirs):
    target_dir, binary_dir = dirs
    with pytest.raises(FileSystemError):
        ArtifactInstaller(target_dir, binary_dir).install([Bin("zstd"), Bin("missing"), Sym("unzstd", "zstd")])
    assert os.path.exists(os.path.join(binary_dir, "zstd"))
    assert not os.path.lexists(os.path.join(binary_dir, "unzstd"))


def test_log_output(dirs, capsys):
    target_dir, binary_dir = dirs
    ArtifactInstaller(target_dir, binary_dir).install([Bin("zstdcat", "zcat"), Sym("unzstd", "zstd")])
    out = capsys.readouterr().out
    assert "zstdcat -> zcat" in out
    assert "zstd -> unzstd" in out


def test_creates_binary_dir(dirs):
    target_dir, binary_dir = dirs
    binary_dir = os.path.join(binary_dir, "nested")
    ArtifactInstaller(target_dir, binary_dir).install([Bin("zstd")])
    assert os.path.isfile(os.path.join(binary_dir, "zstd"))


def test_directory_in_place_of_bin_fails(dirs):
    target_dir, binary_dir = dirs
    os.mkdir(os.path.join(binary_dir, "zstd"))
    with pytest.raises(FileSystemError):
        ArtifactInstaller(target_dir, binary_dir).install([Bin("zstd")])
    assert not os.path.exists(os.path.join(binary_dir, "zstd", "zstd"))


def test_copy_keeps_mode(dirs):
    target_dir, binary_dir = dirs
    os.chmod(os.path.join(target_dir, "zstd"), 0o755)
    ArtifactInstaller(target_dir, binary_dir).install([Bin("zstd")])
    assert os.access(os.path.join(binary_dir, "zstd"), os.X_OK)

"""
Tests related to the execution of external tools
"""
import os

import pytest

from mocha.package.errors import ProcessSpawnError, ProcessExitError
from mocha.utils.process import exec_command
from mocha.utils.settings import Settings


def test_captured_output(tmp_path):
    assert exec_command(["sh", "-c", "echo hello"], cwd=str(tmp_path), capture_output=True) == "hello\n"


def test_inherited_output(tmp_path):
    assert exec_command(["true"], cwd=str(tmp_path)) is None


def test_capture_output_setting(tmp_path):
    Settings()["capture_output"] = True
    assert exec_command(["sh", "-c", "echo hello"], cwd=str(tmp_path)) == "hello\n"


def test_working_directory(tmp_path):
    out = exec_command(["pwd"], cwd=str(tmp_path), capture_output=True)
    assert os.path.realpath(out.strip()) == os.path.realpath(str(tmp_path))


def test_missing_program(tmp_path):
    with pytest.raises(ProcessSpawnError) as exc_info:
        exec_command(["mocha-program-that-does-not-exist"], cwd=str(tmp_path))
    assert exc_info.value.cmd == ["mocha-program-that-does-not-exist"]


def test_non_zero_exit_code(tmp_path):
    with pytest.raises(ProcessExitError) as exc_info:
        exec_command(["sh", "-c", "echo out; echo err >&2; exit 3"], cwd=str(tmp_path), capture_output=True)
    assert exc_info.value.return_code == 3
    assert exc_info.value.out == "out\n"
    assert exc_info.value.err == "err\n"
    assert exc_info.value.cwd == str(tmp_path)


def test_non_zero_exit_code_without_capturing(tmp_path):
    with pytest.raises(ProcessExitError) as exc_info:
        exec_command(["false"], cwd=str(tmp_path))
    assert exc_info.value.out is None

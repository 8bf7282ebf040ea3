"""
Execution of the external tools (source control and build tools).
"""

import logging
import subprocess
import typing as t

from mocha.package.errors import ProcessSpawnError, ProcessExitError
from mocha.utils.settings import Settings


def exec_command(cmd: t.List[str], cwd: str, capture_output: bool = None) -> t.Optional[str]:
    """
    Executes the passed command and blocks until it exits.
    By default the process inherits the standard streams, so its output is interleaved
    with the output of mocha.

    :param cmd: program and arguments
    :param cwd: working directory of the process
    :param capture_output: capture stdout and stderr, defaults to the `capture_output` setting
    :return: captured standard output or None if the output wasn't captured
    :raises: ProcessSpawnError if the process can't be started
    :raises: ProcessExitError if the process exits with a non zero exit code
    """
    capture_output = Settings().default(capture_output, "capture_output")
    logging.debug("Execute {!r} in {}".format(" ".join(cmd), cwd))
    pipe = subprocess.PIPE if capture_output else None
    try:
        proc = subprocess.Popen(cmd, cwd=cwd, stdout=pipe, stderr=pipe, universal_newlines=True)
    except OSError as err:
        raise ProcessSpawnError(cmd, cwd, err)
    out, err = proc.communicate()
    if proc.returncode != 0:
        raise ProcessExitError(cmd, cwd, proc.returncode, out, err)
    return out

"""
Errors raised while installing a package. Each kind of failure has its own class
that carries the context needed to report it.
"""

import logging
import typing as t


class MochaError(EnvironmentError):
    """ Base error for everything that goes wrong while installing a package """
    pass


class SpecParseError(MochaError):
    """ The manifest couldn't be parsed into a package """

    def __init__(self, name: str, content: str, cause: str):
        super().__init__("Can't parse the manifest of package {!r}: {}".format(name, cause))
        self.name = name  # type: str
        """ Name of the package """
        self.content = content  # type: str
        """ Original text of the manifest """
        self.cause = cause  # type: str
        """ Description of the problem """


class FileSystemError(MochaError):
    """ Creating, reading, writing, copying or linking a file failed """

    def __init__(self, operation: str, path: str, cause: OSError):
        super().__init__("Can't {} {}: {}".format(operation, path, cause))
        self.operation = operation  # type: str
        """ Failed operation, e.g. "copy" """
        self.path = path  # type: str
        """ Affected path """
        self.cause = cause  # type: OSError


class ProcessSpawnError(MochaError):
    """ An external tool couldn't be started, e.g. because it isn't installed """

    def __init__(self, cmd: t.List[str], cwd: str, cause: OSError):
        super().__init__("Can't execute {!r} in {}: {}".format(" ".join(cmd), cwd, cause))
        self.cmd = cmd  # type: t.List[str]
        self.cwd = cwd  # type: str
        self.cause = cause  # type: OSError


class ProcessExitError(MochaError):
    """ An external tool exited with a non zero exit code """

    def __init__(self, cmd: t.List[str], cwd: str, return_code: int, out: t.Optional[str] = None,
                 err: t.Optional[str] = None):
        super().__init__("{!r} failed in {} with exit code {}".format(" ".join(cmd), cwd, return_code))
        self.cmd = cmd  # type: t.List[str]
        self.cwd = cwd  # type: str
        self.return_code = return_code  # type: int
        self.out = out  # type: t.Optional[str]
        """ Captured standard output, None if it wasn't captured """
        self.err = err  # type: t.Optional[str]
        """ Captured standard error output, None if it wasn't captured """

    def log(self):
        """ Log the captured output of the failed process """
        logging.error("cmd: {!r}".format(" ".join(self.cmd)))
        if self.out is not None:
            logging.error("out: {!r}".format(self.out))
        if self.err is not None:
            logging.error("err: {!r}".format(self.err))

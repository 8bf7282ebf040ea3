import logging
import os

from mocha.package.errors import FileSystemError
from mocha.utils.process import exec_command
from mocha.utils.settings import Settings
from mocha.utils.typecheck import *
from mocha.utils.util import Stopwatch


class VCSDriver:
    """
    Abstract version control system driver that keeps a working copy of a remote repository up to date.
    """

    def __init__(self, dir: str, program: str = None, depth: int = None):
        """
        Initializes the driver for a working copy.

        :param dir: directory of the working copy, it doesn't have to exist yet
        :param program: used source control program, defaults to `sync/program`
        :param depth: depth of shallow clones and fetches, defaults to `sync/depth`
        """
        typecheck_locals(dir=NonEmptyStr())
        self.dir = os.path.abspath(dir)  # type: str
        """ Directory of the working copy """
        self.program = Settings().default(program, "sync/program")  # type: str
        """ Used source control program """
        self.depth = Settings().default(depth, "sync/depth")  # type: int
        """ Depth of shallow clones and fetches """

    def has_working_copy(self) -> bool:
        """
        Does the working copy already exist? Its content and remote aren't verified.
        """
        return os.path.exists(self.dir)

    def clone(self, source: str):
        """
        Creates the working copy directory and clones the passed repository into it.

        :raises: FileSystemError if the directory can't be created
        :raises: ProcessSpawnError or ProcessExitError if the source control program fails
        """
        raise NotImplementedError()

    def fetch(self):
        """
        Fetches the newest revision into the existing working copy.

        :raises: ProcessSpawnError or ProcessExitError if the source control program fails
        """
        raise NotImplementedError()

    def sync(self, source: str) -> float:
        """
        Fetches if the working copy exists and clones the passed repository otherwise.

        :param source: URL of the repository
        :return: elapsed seconds
        """
        stopwatch = Stopwatch()
        if self.has_working_copy():
            logging.debug("Fetch into {}".format(self.dir))
            self.fetch()
        else:
            logging.debug("Clone {} into {}".format(source, self.dir))
            self.clone(source)
        return stopwatch.elapsed()

    def _exec(self, *args: str):
        exec_command([self.program] + list(args), cwd=self.dir)


class GitDriver(VCSDriver):
    """
    Driver for git compatible programs (git or gix) that uses shallow clones without tags.
    """

    def clone(self, source: str):
        typecheck_locals(source=NonEmptyStr())
        try:
            os.mkdir(self.dir)
        except OSError as err:
            raise FileSystemError("create directory", self.dir, err)
        self._exec("clone", "--depth", str(self.depth), "--no-tags", source, ".")

    def fetch(self):
        self._exec("fetch", "--depth", str(self.depth))

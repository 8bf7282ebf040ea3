"""
Directory layout below the installation root::

    root/src/<package>/                                  working checkout
    root/src/<package>/build.zig                         generated secondary build configuration
    root/src/<package>/target/<triple>/release/<bin>     primary build output
    root/bin/<artifact>                                  installed binaries and links
"""

import os

from mocha.utils.settings import Settings
from .errors import FileSystemError


class Layout:
    """
    Paths of the installation root.
    """

    def __init__(self, root_dir: str = None, target: str = None):
        """
        Creates a layout.

        :param root_dir: installation root, defaults to the `root_dir` setting
        :param target: target triple of the primary build, defaults to `build/primary/target`
        """
        self.root_dir = os.path.abspath(Settings().default(root_dir, "root_dir"))  # type: str
        """ Installation root """
        self.target = Settings().default(target, "build/primary/target")  # type: str
        """ Target triple that names the primary build output directory """

    @property
    def src_dir(self) -> str:
        return os.path.join(self.root_dir, "src")

    @property
    def binary_dir(self) -> str:
        return os.path.join(self.root_dir, "bin")

    def source_dir(self, package_name: str) -> str:
        """ Working checkout of the package """
        return os.path.join(self.src_dir, package_name)

    def target_dir(self, package_name: str) -> str:
        """ Directory that contains the release binaries of the primary build """
        return os.path.join(self.source_dir(package_name), "target", self.target, "release")

    def ensure(self):
        """
        Creates the root, the source and the binary directory if they don't exist.

        :raises: FileSystemError if a directory can't be created
        """
        for path in [self.root_dir, self.src_dir, self.binary_dir]:
            try:
                os.makedirs(path, exist_ok=True)
            except OSError as err:
                raise FileSystemError("create directory", path, err)

import logging
import os
import shutil
import typing as t

import click

from mocha.package.errors import FileSystemError
from mocha.package.spec import Artifact, Bin, Sym


def artifact_log(kind: str, source_name: str, destination_name: t.Optional[str] = None):
    """
    Prints a line for an installed artifact, e.g. " bin  zstd -> zst".

    :param kind: "bin" or "sym"
    :param source_name: built file or link target
    :param destination_name: installed name, if it differs from the source name
    """
    badge = click.style(" {} ".format(kind), fg="black", bg="green")
    if destination_name is not None:
        click.echo(" {} {} -> {}".format(badge, source_name, destination_name))
    else:
        click.echo(" {} {}".format(badge, source_name))


def remove_file(path: str):
    """
    Removes the file or link at the passed path and ignores all errors.
    """
    try:
        os.remove(path)
    except OSError as err:
        logging.debug("Can't remove {}: {}".format(path, err))


class ArtifactInstaller:
    """
    Installs the artifacts of a built package into the binary directory.
    """

    def __init__(self, target_dir: str, binary_dir: str):
        """
        Creates an installer.

        :param target_dir: directory that contains the release binaries of the package
        :param binary_dir: shared binary directory
        """
        self.target_dir = target_dir  # type: str
        self.binary_dir = binary_dir  # type: str

    def install(self, artifacts: t.Iterable[Artifact]):
        """
        Installs the passed artifacts in their order and stops at the first failure.
        Already installed artifacts stay in place.

        :raises: FileSystemError if an artifact can't be installed
        """
        try:
            os.makedirs(self.binary_dir, exist_ok=True)
        except OSError as err:
            raise FileSystemError("create directory", self.binary_dir, err)
        for artifact in artifacts:
            if isinstance(artifact, Bin):
                self.install_bin(artifact)
            elif isinstance(artifact, Sym):
                self.install_sym(artifact)
            else:
                raise TypeError("Unknown artifact {!r}".format(artifact))

    def install_bin(self, artifact: Bin):
        """
        Copies the built executable into the binary directory, under its new name if it has one.
        The destination has to be a file, a directory in its place makes the copy fail.
        """
        src_path = os.path.join(self.target_dir, artifact.name)
        dst_path = os.path.join(self.binary_dir, artifact.installed_name)
        artifact_log("bin", artifact.name, artifact.rename_to)
        remove_file(dst_path)
        try:
            shutil.copyfile(src_path, dst_path)
            shutil.copymode(src_path, dst_path)
        except OSError as err:
            raise FileSystemError("copy {} to".format(src_path), dst_path, err)

    def install_sym(self, artifact: Sym):
        """
        Creates a link whose target is the unresolved `points_to` name, so it resolves
        relative to the binary directory.
        """
        dst_path = os.path.join(self.binary_dir, artifact.name)
        artifact_log("sym", artifact.points_to, artifact.name)
        remove_file(dst_path)
        try:
            os.symlink(artifact.points_to, dst_path)
        except OSError as err:
            raise FileSystemError("create link to {} at".format(artifact.points_to), dst_path, err)

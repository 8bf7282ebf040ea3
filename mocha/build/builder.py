import logging
import typing as t

from mocha.utils.process import exec_command
from mocha.utils.settings import Settings
from mocha.utils.typecheck import *
from mocha.utils.util import Stopwatch


class Builder:
    """
    Builds a package in its source directory: first the native sub components with the
    secondary build tool, then the package itself with the primary build tool.
    Both builds cross compile for the same target.
    """

    def __init__(self, source_dir: str, features: t.Iterable[str] = ()):
        """
        Creates a new builder for a package.

        :param source_dir: source directory that contains the generated build configuration
        :param features: enabled features of the primary build
        """
        typecheck_locals(source_dir=NonEmptyStr())
        self.source_dir = source_dir  # type: str
        """ Working directory of both builds """
        self.features = list(features)  # type: t.List[str]
        """ Enabled features of the primary build """
        typecheck(self.features, List(Str()), "features")

    def secondary_build_cmd(self) -> t.List[str]:
        """
        Command that builds the native sub components, e.g.
        `zig build -Doptimize=ReleaseFast -Dtarget=x86_64-linux-musl`
        """
        conf = Settings()["build/secondary"]
        return [conf["program"], "build",
                "-Doptimize={}".format(conf["optimize"]),
                "-Dtarget={}".format(conf["target"])]

    def primary_build_cmd(self) -> t.List[str]:
        """
        Command that builds the package with the pinned toolchain, e.g.
        `cargo +nightly zigbuild --features=a,b --no-default-features --target=x86_64-unknown-linux-musl --release`
        """
        conf = Settings()["build/primary"]
        return [conf["program"], "+" + conf["toolchain"], conf["subcommand"],
                "--features={}".format(",".join(self.features)),
                "--no-default-features",
                "--target={}".format(conf["target"]),
                "--release"]

    def build(self) -> float:
        """
        Runs both builds, one after the other.

        :return: elapsed seconds
        :raises: ProcessSpawnError if a build tool can't be started
        :raises: ProcessExitError if a build tool fails, the primary build isn't run after a failing secondary build
        """
        stopwatch = Stopwatch()
        logging.debug("Build the native sub components in {}".format(self.source_dir))
        exec_command(self.secondary_build_cmd(), cwd=self.source_dir)
        logging.debug("Build the package in {}".format(self.source_dir))
        exec_command(self.primary_build_cmd(), cwd=self.source_dir)
        return stopwatch.elapsed()

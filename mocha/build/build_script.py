"""
Generation of the build configuration (a build.zig file) for the native sub components of a package.
"""

import logging
import os
import typing as t

from mocha.package.errors import FileSystemError
from mocha.package.spec import BetaArtifact, Library, Executable
from mocha.utils.settings import Settings

INDENT = "    "  # type: str

PREAMBLE = """const std = @import("std");

pub fn build(b: *std.Build) void {
    const optimize = b.standardOptimizeOption(.{});
    const target = b.standardTargetOptions(.{});

"""  # type: str
""" Start of the build function, declares the standard optimize and target options """

INCLUDE_PATHS = ["lib", "lib/common"]  # type: t.List[str]
""" Include search paths of every generated target """


def quote(text: str) -> str:
    """ Zig string literal for the passed text """
    return '"{}"'.format(text.replace("\\", "\\\\").replace('"', '\\"'))


class BuildScriptGenerator:
    """
    Generates the build configuration for a list of beta artifacts.
    The output only depends on the artifacts and their order.
    """

    def __init__(self, beta_artifacts: t.Iterable[BetaArtifact], config_file: str = None,
                 compression_lib: str = None):
        """
        Creates a generator.

        :param beta_artifacts: libraries and executables to build, in this order
        :param config_file: file name of the configuration, defaults to `build/secondary/config_file`
        :param compression_lib: library archive that executables link against,
               defaults to `build/secondary/compression_lib`
        """
        self.beta_artifacts = list(beta_artifacts)  # type: t.List[BetaArtifact]
        self.config_file = Settings().default(config_file, "build/secondary/config_file")  # type: str
        self.compression_lib = Settings().default(compression_lib, "build/secondary/compression_lib")  # type: str

    def generate(self) -> str:
        """
        Returns the text of the build configuration.
        """
        lines = [PREAMBLE]
        for artifact in self.beta_artifacts:
            if isinstance(artifact, Library):
                lines.append(self._target("lib" + artifact.name, "addStaticLibrary", artifact))
            elif isinstance(artifact, Executable):
                lines.append(self._target(artifact.name, "addExecutable", artifact,
                                          object_files=[self.compression_lib]))
            else:
                raise TypeError("{!r} is neither a library nor an executable".format(artifact))
        lines.append("}\n")
        return "".join(lines)

    def _target(self, var: str, method: str, artifact: BetaArtifact, object_files: t.List[str] = None) -> str:
        """
        Returns the definition of a target that is built from C sources and installed.

        :param var: variable name of the target
        :param method: build method that creates the target
        :param artifact: built artifact
        :param object_files: prebuilt archives that the target links against
        """
        sources = (",\n" + INDENT * 2).join(quote(source) for source in artifact.sources)
        lines = [
            "const {} = b.{}(.{{".format(var, method),
            "    .link_libc = true,",
            "    .name = {},".format(quote(artifact.name)),
            "    .optimize = optimize,",
            "    .target = target,",
            "});",
            "",
            "{}.addCSourceFiles(&.{{".format(var),
            "    " + sources,
            "    },",
            "    &[_][]const u8{},",
            ");",
        ]
        lines.extend("{}.addIncludePath({});".format(var, quote(path)) for path in INCLUDE_PATHS)
        lines.extend("{}.addObjectFile({});".format(var, quote(path)) for path in object_files or [])
        lines.extend(["", "b.installArtifact({});".format(var), ""])
        return "".join(INDENT + line + "\n" if line else "\n" for line in lines)

    def write(self, source_dir: str) -> str:
        """
        Writes the build configuration into the passed directory, an existing file is overwritten.

        :param source_dir: source directory of the package
        :return: path of the written file
        :raises: FileSystemError if the file can't be written
        """
        path = os.path.join(source_dir, self.config_file)
        logging.debug("Write the build configuration {}".format(path))
        try:
            with open(path, "w") as f:
                f.write(self.generate())
        except OSError as err:
            raise FileSystemError("write", path, err)
        return path

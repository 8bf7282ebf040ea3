import logging
import typing as t

import humanfriendly

from mocha.package.layout import Layout
from mocha.package.spec import Package
from mocha.utils.vcs import GitDriver, VCSDriver
from .build_script import BuildScriptGenerator
from .builder import Builder
from .installer import ArtifactInstaller


class InstallProcessor:
    """
    Installs packages: sync the source, generate the secondary build configuration,
    build and install the artifacts. The stages run strictly one after another and
    the first error aborts the installation without undoing the earlier stages.
    """

    def __init__(self, layout: Layout = None, vcs_driver_cls: t.Type[VCSDriver] = GitDriver):
        """
        Creates a processor.

        :param layout: directory layout, defaults to the layout of the configured root directory
        :param vcs_driver_cls: driver used to sync the sources
        """
        self.layout = layout or Layout()  # type: Layout
        self.vcs_driver_cls = vcs_driver_cls  # type: t.Type[VCSDriver]

    def install(self, package: Package):
        """
        Installs the passed package.

        :raises: MochaError if a stage fails
        """
        self.layout.ensure()
        source_dir = self.layout.source_dir(package.name)

        logging.info("sync {}..".format(package.name))
        took = self.vcs_driver_cls(source_dir).sync(package.source)
        logging.info("sync {}.. done! took {}".format(package.name, humanfriendly.format_timespan(took)))

        logging.info("build {}..".format(package.name))
        BuildScriptGenerator(package.beta_artifacts).write(source_dir)
        took = Builder(source_dir, package.features).build()
        logging.info("build {}.. done! took {}".format(package.name, humanfriendly.format_timespan(took)))

        ArtifactInstaller(self.layout.target_dir(package.name), self.layout.binary_dir).install(package.artifacts)

    def install_files(self, manifests: t.List[str]) -> t.List[Package]:
        """
        Loads and installs the passed manifests in their order, the first failing package aborts.

        :param manifests: paths of the manifests
        :return: installed packages
        """
        packages = [Package.from_path(manifest) for manifest in manifests]
        for package in packages:
            self.install(package)
        return packages

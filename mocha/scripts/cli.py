import logging
import sys
from enum import Enum

import click
import yaml

import mocha.scripts.version
from mocha.build.build_processor import InstallProcessor
from mocha.build.build_script import BuildScriptGenerator
from mocha.package.errors import MochaError, ProcessExitError
from mocha.package.spec import Package
from mocha.utils.click_helper import cmd_option, CmdOption, CmdOptionList
from mocha.utils.settings import Settings, SettingsError


Settings().load_files()


class ErrorCode(Enum):
    NO_ERROR = 0
    PROGRAM_ERROR = 1
    MOCHA_ERROR = 255


@click.group(epilog="""
mocha (version {})

Settings are loaded from `config.yaml` in the application directory
and from `mocha.yaml` in the current working directory.
""".format(mocha.scripts.version.version))
def cli():
    pass


command_docs = {
    "install": "Fetch, build and install packages",
    "build_script": "Print the generated build configuration of a package",
    "show": "Print the parsed manifest of a package",
    "init": "Helper commands to initialize files (like settings)",
    "version": "Print the current version ({})".format(mocha.scripts.version.version)
}

common_options = CmdOptionList(
    CmdOption.from_non_plugin_settings("")
)

install_options = CmdOptionList(
    CmdOption.from_non_plugin_settings("sync", name_prefix="sync_"),
    CmdOption.from_non_plugin_settings("build/secondary", name_prefix="secondary_"),
    CmdOption.from_non_plugin_settings("build/primary", name_prefix="primary_")
)


def fail(err: MochaError):
    """
    Logs the passed error and exits with the program error code.
    """
    if isinstance(err, ProcessExitError):
        err.log()
    logging.error(str(err))
    sys.exit(ErrorCode.PROGRAM_ERROR.value)


@cli.command(short_help=command_docs["install"])
@click.argument("manifests", type=click.Path(exists=True, dir_okay=False), nargs=-1, required=True)
@cmd_option(CmdOptionList(common_options, install_options))
def install(manifests):
    mocha__install(manifests)


def mocha__install(manifests):
    try:
        InstallProcessor().install_files(list(manifests))
    except KeyboardInterrupt:
        logging.error("Aborted")
        sys.exit(ErrorCode.PROGRAM_ERROR.value)
    except MochaError as err:
        fail(err)


@cli.command(name="build_script", short_help=command_docs["build_script"])
@click.argument("manifest", type=click.Path(exists=True, dir_okay=False))
@cmd_option(CmdOptionList(common_options, CmdOption.from_non_plugin_settings("build/secondary",
                                                                             name_prefix="secondary_")))
def build_script(manifest):
    try:
        package = Package.from_path(manifest)
    except MochaError as err:
        fail(err)
    click.echo(BuildScriptGenerator(package.beta_artifacts).generate(), nl=False)


@cli.command(short_help=command_docs["show"])
@click.argument("manifest", type=click.Path(exists=True, dir_okay=False))
@cmd_option(common_options)
def show(manifest):
    try:
        package = Package.from_path(manifest)
    except MochaError as err:
        fail(err)
    click.echo("# package {}".format(package.name))
    click.echo(yaml.safe_dump(package.to_dict(), default_flow_style=False, sort_keys=False), nl=False)


@cli.group(short_help=command_docs["init"])
def init():
    pass


@init.command(short_help="Create a settings file with the current settings")
@click.argument("file", type=click.Path(exists=False), default=Settings.config_file_name)
@cmd_option(common_options)
def settings(file):
    Settings().store_into_file(file)
    logging.info("Stored the settings in {}".format(file))


@cli.command(short_help=command_docs["version"])
def version():
    click.echo(mocha.scripts.version.version)


def cli_with_error_catching():
    """
    Process the command line arguments and catch (some) errors.
    """
    try:
        cli()
    except (SettingsError, TypeError) as err:
        logging.error(err)
        sys.exit(ErrorCode.MOCHA_ERROR.value)
    except EnvironmentError as err:
        logging.error(err)
        sys.exit(ErrorCode.PROGRAM_ERROR.value)


if __name__ == "__main__":
    cli_with_error_catching()

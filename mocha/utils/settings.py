import copy
import logging
import os
import typing as t

import click
import yaml

from mocha.utils.typecheck import *
from mocha.utils.util import recursive_exec_for_leafs, Singleton


class SettingsError(ValueError):
    """ Error raised if something with the settings goes wrong """
    pass


class Settings(metaclass=Singleton):
    """
    Manages the settings.
    The settings keys and sub keys are combined by a slash, e.g. "build/primary/toolchain".
    """

    config_file_name = "mocha.yaml"  # type: str
    """ Default name of the configuration files """
    type_scheme = Dict({
        "settings": Str() // Default("") // Description("Additional settings file"),
        "root_dir": NonEmptyStr() // Default("/mocha")
                    // Description("Installation root, contains the 'src' and the 'bin' directory"),
        "log_level": ExactEither("debug", "info", "warn", "error", "quiet") // Default("info")
                     // Description("Logging level"),
        "capture_output": Bool() // Default(False)
                          // Description("Capture the output of the external tools instead of passing it through, "
                                         "it is attached to the error if a tool fails"),
        "sync": Dict({
            "program": NonEmptyStr() // Default("gix") // Description("Source control program used to clone and fetch"),
            "depth": Int(lambda x: x > 0) // Default(1) // Description("Depth of the shallow clones and fetches"),
        }) // Description("Source synchronization"),
        "build": Dict({
            "secondary": Dict({
                "program": NonEmptyStr() // Default("zig") // Description("Native build tool"),
                "config_file": NonEmptyStr() // Default("build.zig")
                               // Description("Name of the generated build configuration in the source directory"),
                "optimize": NonEmptyStr() // Default("ReleaseFast") // Description("Optimization mode"),
                "target": NonEmptyStr() // Default("x86_64-linux-musl") // Description("Cross compilation target"),
                "compression_lib": NonEmptyStr() // Default("zig-out/lib/libzstd.a")
                                   // Description("Prebuilt library archive that generated executables link against"),
            }) // Description("Build of the native sub components"),
            "primary": Dict({
                "program": NonEmptyStr() // Default("cargo") // Description("Build tool of the package"),
                "toolchain": NonEmptyStr() // Default("nightly") // Description("Pinned toolchain channel"),
                "subcommand": NonEmptyStr() // Default("zigbuild") // Description("Used build sub command"),
                "target": NonEmptyStr() // Default("x86_64-unknown-linux-musl")
                          // Description("Target triple, also names the output directory below 'target'"),
            }) // Description("Build of the package itself"),
        }) // Description("Build tool configuration"),
    })  # type: Dict
    """ Type scheme of the settings """

    def __init__(self):
        """
        Initializes the Settings singleton with the default settings.

        :raises: SettingsError if the defaults don't match the type scheme
        """
        self.prefs = copy.deepcopy(self.type_scheme.get_default())  # type: t.Dict[str, t.Any]
        """ The current configuration """
        res = self._validate_settings_dict(self.prefs, "default settings")
        if not res:
            raise SettingsError(str(res))
        self._setup()

    def load_files(self):
        """ Loads the configuration files from the config and the current directory """
        self.load_from_config_dir()
        self.load_from_current_dir()
        self._setup()

    def _setup(self):
        """
        Applies the log level.
        """
        log_level = self["log_level"]
        logger = logging.getLogger()
        logger.disabled = log_level == "quiet"
        mapping = {
            "debug": logging.DEBUG,
            "info": logging.INFO,
            "warn": logging.WARNING,
            "error": logging.ERROR,
            "quiet": logging.ERROR
        }
        logger.setLevel(mapping[log_level])

    def reset(self):
        """
        Resets the current settings to the defaults.
        """
        self.prefs = copy.deepcopy(self.type_scheme.get_default())
        self._setup()

    def _validate_settings_dict(self, data: t.Dict[str, t.Any], description: str = None):
        """
        Check whether the passed dictionary matches the settings type scheme.

        :return: True like object if valid, else string like object which is the error message
        """
        return verbose_isinstance(data, self.type_scheme, description or "Settings")

    def load_file(self, file: str):
        """
        Loads the configuration from a YAML file.

        :param file: path to the file
        :raises: SettingsError if the settings file is incorrect or doesn't exist
        """
        tmp = copy.deepcopy(self.prefs)
        try:
            with open(file, "r") as stream:
                data = yaml.safe_load(stream) or {}
        except (yaml.YAMLError, IOError) as err:
            raise SettingsError(str(err))
        if not isinstance(data, dict):
            raise SettingsError("Settings file '{}' doesn't contain a mapping".format(file))

        def func(key, path, value):
            self._set(path, value)

        try:
            recursive_exec_for_leafs(data, func)
        except SettingsError:
            self.prefs = tmp
            raise
        res = self._validate_settings_dict(self.prefs, "settings with ones from file '{}'".format(file))
        if not res:
            self.prefs = tmp
            raise SettingsError(str(res))
        self._setup()

    def load_from_dict(self, config_dict: t.Dict[str, t.Any]):
        """
        Load the configuration from the passed dictionary, unspecified settings get their default values.

        :param config_dict: passed configuration dictionary
        """
        tmp = self.prefs
        self.prefs = copy.deepcopy(self.type_scheme.get_default())

        def func(key, path, value):
            self._set(path, value)

        try:
            recursive_exec_for_leafs(config_dict, func)
        except SettingsError:
            self.prefs = tmp
            raise
        res = self._validate_settings_dict(self.prefs, "settings with ones from config dict")
        if not res:
            self.prefs = tmp
            raise SettingsError(str(res))
        self._setup()

    def load_from_config_dir(self):
        """
        Load the config file from the application directory (e.g. in the users home folder) if it exists.
        """
        conf = os.path.join(click.get_app_dir("mocha"), "config.yaml")
        if os.path.isfile(conf):
            self.load_file(conf)

    def load_from_current_dir(self):
        """
        Load the configuration from the configuration file in the current working directory if it exists.
        """
        if os.path.isfile(self.config_file_name):
            self.load_file(self.config_file_name)

    def get(self, key: str) -> t.Any:
        """
        Get the setting with the given key.

        :param key: name of the setting
        :return: value of the setting
        :raises: SettingsError if the setting doesn't exist
        """
        path = key.split("/")
        if not self.validate_key_path(path):
            raise SettingsError("No such setting {}".format(key))
        data = self.prefs
        for sub in path:
            data = data[sub]
        return data

    def __getitem__(self, key: str) -> t.Any:
        """
        Alias for self.get(key).
        """
        return self.get(key)

    def _set(self, path: t.List[str], value):
        """
        Set the setting at the passed path without validating it.

        :raises: SettingsError if the path doesn't exist
        """
        if not self.validate_key_path(path):
            raise SettingsError("No such setting {}".format("/".join(path)))
        tmp_pref = self.prefs
        for key in path[0:-1]:
            tmp_pref = tmp_pref[key]
        tmp_pref[path[-1]] = value
        if path == ["settings"] and value != "":
            self.load_file(value)

    def set(self, key: str, value, validate: bool = True):
        """
        Sets the setting key to the passed new value

        :param key: settings key
        :param value: new value
        :param validate: validate after the setting operation
        :raises: SettingsError if the setting isn't valid
        """
        tmp = copy.deepcopy(self.prefs)
        self._set(key.split("/"), value)
        if validate:
            res = self._validate_settings_dict(self.prefs, "settings with new setting ({}={!r})".format(key, value))
            if not res:
                self.prefs = tmp
                raise SettingsError(str(res))
        self._setup()

    def __setitem__(self, key: str, value):
        """
        Alias for self.set(key, value).
        """
        self.set(key, value)

    def validate_key_path(self, path: t.List[str]) -> bool:
        """
        Validates a path into the settings tree.

        :param path: list of sub keys
        """
        tmp = self.prefs
        for item in path:
            if not isinstance(tmp, dict) or item not in tmp:
                return False
            tmp = tmp[item]
        return True

    def has_key(self, key: str) -> bool:
        """ Does the passed key exist? """
        return self.validate_key_path(key.split("/"))

    def get_type_scheme(self, key: str) -> Type:
        """
        Returns the type scheme of the given key.

        :raises: SettingsError if the setting with the given key doesn't exist
        """
        if not self.has_key(key):
            raise SettingsError("Setting {} doesn't exist".format(key))
        tmp_typ = self.type_scheme
        for subkey in key.split("/"):
            tmp_typ = tmp_typ[subkey]
        return tmp_typ

    def default(self, value: t.Optional[t.Any], key: str):
        """
        Returns the passed value if isn't None else the settings value under the passed key.
        """
        if value is None:
            return self[key]
        typecheck(value, self.get_type_scheme(key))
        return value

    def store_into_file(self, file_name: str):
        """
        Stores the current settings into a YAML file with comments.

        :param file_name: name of the resulting file
        """
        with open(file_name, "w") as f:
            print(self.type_scheme.get_default_yaml(defaults=self.prefs).strip(), file=f)

"""
This module simplifies the creation of click options from the settings type scheme.
"""

import logging
import sys
import typing as t

import click
from click.core import ParameterSource

from mocha.utils.settings import Settings, SettingsError
from mocha.utils.typecheck import *


class CmdOption:
    """
    A command line option that is backed by a setting: passing the option sets the setting.
    """

    def __init__(self, option_name: str, settings_key: str, is_eager: bool = False):
        """
        Creates an option for a setting.

        :param option_name: name of the option (without the leading dashes)
        :param settings_key: key of the setting
        :param is_eager: process this option before all others
        """
        typecheck_locals(option_name=NonEmptyStr(), settings_key=NonEmptyStr())
        self.option_name = option_name  # type: str
        self.settings_key = settings_key  # type: str
        self.is_eager = is_eager  # type: bool
        self.type_scheme = Settings().get_type_scheme(settings_key)  # type: Type
        """ Type scheme of the backing setting """
        self.description = (self.type_scheme.description or "").strip().split("\n")[0]  # type: str
        self.is_flag = isinstance(self.type_scheme, Bool)  # type: bool
        """ Is this a "--OPT/--no-OPT" flag? """

    def callback(self, ctx: click.Context, param: click.Parameter, value):
        """
        Sets the setting if the option was passed on the command line.
        """
        if ctx.get_parameter_source(param.name) not in [ParameterSource.COMMANDLINE, ParameterSource.ENVIRONMENT]:
            return value
        try:
            Settings()[self.settings_key] = value
        except SettingsError as err:
            logging.error("Error while processing the passed value ({val!r}) of option {opt}: {msg}"
                          .format(val=value, opt=self.option_name, msg=err))
            sys.exit(255)
        return value

    def click_type(self) -> t.Any:
        """ Type of the option value for click """
        typ = self.type_scheme
        while isinstance(typ, Constraint):
            typ = typ.constrained_type
        if isinstance(typ, ExactEither):
            return click.Choice(typ.exp_values)
        if isinstance(typ, Int):
            return int
        return str

    def decorate(self, func: t.Callable) -> t.Callable:
        """ Applies click.option to the passed function """
        help_text = "{} (default: {!r})".format(self.description, Settings()[self.settings_key])
        if self.is_flag:
            return click.option("--{name}/--no-{name}".format(name=self.option_name), default=None,
                                callback=self.callback, expose_value=False, help=help_text,
                                is_eager=self.is_eager)(func)
        return click.option("--" + self.option_name, type=self.click_type(), default=None,
                            callback=self.callback, expose_value=False, help=help_text,
                            is_eager=self.is_eager)(func)

    @classmethod
    def from_non_plugin_settings(cls, settings_domain: str, name_prefix: str = None,
                                 exclude: t.List[str] = None) -> 'CmdOptionList':
        """
        Creates an option for every setting in the settings domain that isn't a Dict.

        :param settings_domain: settings domain to look into (or "" for the root domain)
        :param name_prefix: prefix of each option name (avoids ambiguities)
        :param exclude: sub keys to exclude
        """
        name_prefix = name_prefix or ""
        exclude = exclude or []
        domain = Settings().type_scheme if settings_domain == "" else Settings().get_type_scheme(settings_domain)
        ret = CmdOptionList()
        for sub_key in domain.data:
            if sub_key in exclude or isinstance(domain[sub_key], Dict):
                continue
            key = settings_domain + "/" + sub_key if settings_domain != "" else sub_key
            ret.append(CmdOption(name_prefix + sub_key, key, is_eager=key == "settings"))
        return ret


class CmdOptionList:
    """
    A list of CmdOptions that flattens appended lists.
    """

    def __init__(self, *options: t.Union[CmdOption, 'CmdOptionList']):
        self.options = []  # type: t.List[CmdOption]
        for option in options:
            self.append(option)

    def append(self, options: t.Union[CmdOption, 'CmdOptionList']) -> 'CmdOptionList':
        if isinstance(options, CmdOption):
            self.options.append(options)
        else:
            self.options.extend(options.options)
        return self

    def __iter__(self):
        return iter(self.options)

    def __len__(self) -> int:
        return len(self.options)


def cmd_option(option: t.Union[CmdOption, CmdOptionList]) -> t.Callable[[t.Callable], t.Callable]:
    """
    Wrapper around click.option that works with CmdOption objects and lists of them.
    """
    def func(f: t.Callable) -> t.Callable:
        options = [option] if isinstance(option, CmdOption) else list(option)
        for opt in sorted(options, key=lambda o: o.option_name, reverse=True):
            f = opt.decorate(f)
        return f
    return func

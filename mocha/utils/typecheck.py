"""
Type checking for nested structures that come directly from the user,
e.g. from the YAML manifests and settings files.

Type instances are usable with the standard isinstance function::

    isinstance(["a", "b"], List(Str()))

They support the "|" operator (produces Either(one, two)) and the "//" operator
to annotate them with a Description or a Default value::

    features = (List(Str()) | NonExistent()) // Default([]) // Description("Build features")

Use verbose_isinstance or typecheck to get an error message that names the offending part
of the checked value.
"""

import inspect
import typing as t

import yaml

__all__ = [
    "Type",
    "Exact",
    "ExactEither",
    "T",
    "Any",
    "Int",
    "NonExistent",
    "Bool",
    "Str",
    "NonEmptyStr",

    "Info",
    "Description",
    "Default",

    "Either",
    "Optional",
    "Constraint",
    "List",
    "Tuple",
    "Dict",
    "verbose_isinstance",
    "typecheck",
    "typecheck_locals"
]


class ConstraintError(ValueError):
    """
    Error that is thrown if a type scheme is constructed from something that isn't a Type.
    """
    pass


class Info:
    """
    Information object that is used to produce meaningful type check error messages.
    """

    def __init__(self, value_name: str = None, value=None, _app_str: str = None):
        """
        Creates a new info object.

        :param value_name: name of the value that is type checked
        :param value: value that is type checked
        """
        self.value_name = value_name  # type: t.Optional[str]
        """ Name of the value that is type checked """
        self._app_str = _app_str or ""  # type: str
        if value_name is None:
            self._value_name = "value {{!r}}{}".format(self._app_str)
        else:
            self._value_name = "{}{} of value {{!r}}".format(self.value_name, self._app_str)
        self.value = value
        """ Main value that is type checked """
        self.has_value = value is not None  # type: bool
        """ Is the value property set to a meaningful value? """

    def set_value(self, value):
        """ Set the main value of this object """
        self.value = value
        self.has_value = True

    def get_value(self) -> t.Any:
        """
        Get the main value of this object.

        :raises: ValueError if the main value isn't set
        """
        if not self.has_value:
            raise ValueError("value is not defined")
        return self.value

    def add_to_name(self, app_str: str) -> 'Info':
        """
        Creates a new info object for a part of the checked value, e.g. "['artifacts'][2]".

        :param app_str: appended to the own part description
        """
        return Info(self.value_name, self.value, self._app_str + app_str)

    def _str(self) -> str:
        return self._value_name.format(self.get_value())

    def errormsg(self, constraint: 'Type', msg: str = None) -> 'InfoMsg':
        """
        Creates a failure message for the passed expected type.

        :param constraint: expected type
        :param msg: additional message, why the constraint isn't met
        """
        app = ": " + msg if msg else ""
        return InfoMsg("{} hasn't the expected type {}{}".format(self._str(), constraint, app))

    def errormsg_cond(self, cond: bool, constraint: 'Type', msg: str = None) -> 'InfoMsg':
        """
        Like errormsg but returns a successful message if `cond` is true.
        """
        if cond:
            return InfoMsg(True)
        return self.errormsg(constraint, msg)

    def errormsg_non_existent(self, constraint: 'Type') -> 'InfoMsg':
        """
        Creates a message that states that the currently examined part of the value is missing.
        """
        return InfoMsg("{} is non existent, expected value of type {}".format(self._str(), constraint))

    def errormsg_unknown_keys(self, keys: t.List[t.Any]) -> 'InfoMsg':
        """
        Creates a message that states that the currently examined dictionary has unexpected keys.
        """
        return InfoMsg("{} has unexpected keys {}".format(self._str(), ", ".join(repr(key) for key in keys)))

    def wrap(self, result: bool) -> 'InfoMsg':
        """
        Wrap the passed bool into a InfoMsg object.
        """
        return InfoMsg(result)


class NoInfo(Info):
    """
    Info object that doesn't create any messages, used by plain isinstance calls.
    """

    def __init__(self):
        super().__init__()
        self.has_value = True

    def get_value(self) -> None:
        return None

    def set_value(self, value):
        pass

    def add_to_name(self, app_str: str) -> 'NoInfo':
        return self

    def errormsg(self, constraint: 'Type', msg: str = None) -> 'InfoMsg':
        return InfoMsg(False)

    def errormsg_cond(self, cond: bool, constraint: 'Type', msg: str = None) -> 'InfoMsg':
        return InfoMsg(cond)

    def errormsg_non_existent(self, constraint: 'Type') -> 'InfoMsg':
        return InfoMsg(False)

    def errormsg_unknown_keys(self, keys: t.List[t.Any]) -> 'InfoMsg':
        return InfoMsg(False)


class InfoMsg:
    """
    Result of a type check, truthy if the check succeeded.
    """

    def __init__(self, msg_or_bool: t.Union[str, bool]):
        """
        Creates a message object.

        :param msg_or_bool: True for success, an error message or False otherwise
        """
        self.success = msg_or_bool is True  # type: bool
        """ Was the type checking successful? """
        self.msg = msg_or_bool if isinstance(msg_or_bool, str) else str(self.success)  # type: str
        """ The error message or "True" if the type checking was successful """

    def __str__(self) -> str:
        return self.msg

    def __bool__(self) -> bool:
        return self.success


class Description:
    """
    A description of a Type, that annotates it::

        Str() // Description("URL of the source repository")
    """

    def __init__(self, description: str):
        self.description = description  # type: str

    def __str__(self) -> str:
        return self.description


class Default:
    """
    A default value annotation for a Type::

        Bool() // Default(False)

    Allows to use Dict(...).get_default() to get a dictionary filled with all default values.
    """

    def __init__(self, default):
        self.default = default
        """ Default value of the annotated type """


class Type(object):
    """
    Base class of all type schemes.
    """

    def __init__(self):
        self.description = None  # type: t.Optional[str]
        """ Description of this type instance """
        self.default = None  # type: t.Optional[Default]
        """ Default value of this type instance """

    def __instancecheck__(self, value, info: Info = None) -> InfoMsg:
        """
        Checks whether or not the passed value has the type specified by this instance.

        :param value: passed value
        :param info: info object for creating error messages
        """
        info = info or NoInfo()
        if not info.has_value:
            info.set_value(value)
        return self._instancecheck_impl(value, info)

    def _instancecheck_impl(self, value, info: Info) -> InfoMsg:
        """
        Implemented by all sub classes: checks the passed value.
        """
        return info.wrap(False)

    def __str__(self) -> str:
        return "Type()"

    def _validate_types(self, *types: 'Type'):
        for typ in types:
            if not isinstance(typ, Type):
                raise ConstraintError("{} is not an instance of a Type subclass".format(typ))

    def __or__(self, other: 'Type') -> 'Either':
        return Either(self, other)

    def __floordiv__(self, other: t.Union[str, Description, Default, t.Callable[[t.Any], bool]]) -> 'Type':
        """
        Annotates this type with a Description (or plain string) or a Default value.
        A callable produces Constraint(other, self).
        """
        if isinstance(other, (str, Description)):
            self.description = str(other)
            return self
        if isinstance(other, Default):
            self.default = other
            typecheck(other.default, self)
            return self
        if isinstance(other, Type):
            raise ConstraintError("{} mustn't be an instance of a Type subclass".format(other))
        return Constraint(other, self)

    def __eq__(self, other) -> bool:
        return type(other) == type(self) and self._eq_impl(other)

    def __hash__(self):
        return id(self)

    def _eq_impl(self, other: 'Type') -> bool:
        return False

    def get_default(self) -> t.Any:
        """
        Returns the default value of this type.

        :raises: ValueError if the default value isn't set
        """
        if self.default is None:
            raise ValueError("{} has no default value.".format(self))
        return self.default.default

    def has_default(self) -> bool:
        return self.default is not None

    def get_default_yaml(self, indents: int = 0, indentation: int = 4, str_list: bool = False,
                         defaults=None) -> t.Union[str, t.List[str]]:
        """
        Produce a YAML string that contains the default value of this type.

        :param indents: number of indents in front of each produced line
        :param indentation: indentation width in number of white spaces
        :param str_list: return a list of lines instead of a combined string?
        :param defaults: value that should be used instead of the default value of this instance
        """
        if defaults is None:
            defaults = self.get_default()
        i_str = " " * indents * indentation
        y_str = yaml.safe_dump(defaults, default_flow_style=True).strip()
        if y_str.endswith("\n..."):
            y_str = y_str[0:-4]
        strs = [i_str + line for line in y_str.split("\n")]
        return strs if str_list else "\n".join(strs)


class Exact(Type):
    """
    Checks for value equivalence.
    """

    def __init__(self, exp_value):
        super().__init__()
        self.exp_value = exp_value
        """ Expected value """

    def _instancecheck_impl(self, value, info: Info) -> InfoMsg:
        cond = isinstance(value, type(self.exp_value)) and value == self.exp_value
        return info.errormsg_cond(cond, self)

    def __str__(self) -> str:
        return "Exact({!r})".format(self.exp_value)

    def _eq_impl(self, other: 'Exact') -> bool:
        return other.exp_value == self.exp_value


class Either(Type):
    """
    Checks for the value to be of one of several types.
    """

    def __init__(self, *types: Type):
        super().__init__()
        self._validate_types(*types)
        self.types = list(types)  # type: t.List[Type]
        """ Possible types """

    def _instancecheck_impl(self, value, info: Info) -> InfoMsg:
        for typ in self.types:
            if typ.__instancecheck__(value, info):
                return info.wrap(True)
        return info.errormsg(self)

    def __str__(self) -> str:
        return "Either({})".format("|".join(str(typ) for typ in self.types))

    def _eq_impl(self, other: 'Either') -> bool:
        return other.types == self.types

    def __or__(self, other: Type) -> 'Either':
        return Either(*(self.types + [other]))


class ExactEither(Type):
    """
    Checks for the value to be one of several exact values.
    """

    def __init__(self, *exp_values):
        super().__init__()
        self.exp_values = list(exp_values)
        """ Expected values """

    def _instancecheck_impl(self, value, info: Info) -> InfoMsg:
        return info.errormsg_cond(value in self.exp_values, self)

    def __str__(self) -> str:
        return "ExactEither({})".format("|".join(repr(val) for val in self.exp_values))

    def _eq_impl(self, other: 'ExactEither') -> bool:
        return other.exp_values == self.exp_values


class Any(Type):
    """
    Matches every value.
    """

    def _instancecheck_impl(self, value, info: Info) -> InfoMsg:
        return info.wrap(True)

    def __str__(self) -> str:
        return "Any"

    def _eq_impl(self, other: 'Any') -> bool:
        return True


class T(Type):
    """
    Wrapper around a native type.
    """

    def __init__(self, native_type: type):
        super().__init__()
        if not isinstance(native_type, type):
            raise ConstraintError("{} is not a native type".format(native_type))
        self.native_type = native_type
        """ Native type that is wrapped """

    def _instancecheck_impl(self, value, info: Info) -> InfoMsg:
        return info.errormsg_cond(isinstance(value, self.native_type), self)

    def __str__(self) -> str:
        return "T({})".format(self.native_type.__name__)

    def _eq_impl(self, other: 'T') -> bool:
        return other.native_type == self.native_type


class Optional(Either):
    """
    Alias for Either(Exact(None), other_type)
    """

    def __init__(self, other_type: Type):
        super().__init__(Exact(None), other_type)

    def __str__(self) -> str:
        return "Optional({})".format(self.types[1])


class Constraint(Type):
    """
    Checks the passed value by a user defined constraint.
    """

    def __init__(self, constraint: t.Callable[[t.Any], bool], constrained_type: Type = None,
                 description: str = None):
        """
        Creates a Constraint instance.

        :param constraint: function that returns True if the user defined constraint is satisfied
        :param constrained_type: Type that the constraint is applied on
        :param description: short description of the constraint (e.g. "non empty")
        """
        super().__init__()
        constrained_type = constrained_type or Any()
        self._validate_types(constrained_type)
        self.constraint = constraint  # type: t.Callable[[t.Any], bool]
        self.constrained_type = constrained_type  # type: Type
        self.description = description  # type: t.Optional[str]

    def _instancecheck_impl(self, value, info: Info) -> InfoMsg:
        res = self.constrained_type.__instancecheck__(value, info)
        if not res:
            return res
        if not self.constraint(value):
            return info.errormsg(self)
        return info.wrap(True)

    def __str__(self) -> str:
        return "{}:{}".format(self.constrained_type, self.description or "<function>")


class List(Type):
    """
    Checks for the value to be a list with elements of a given type.
    """

    def __init__(self, elem_type: Type = None):
        super().__init__()
        elem_type = elem_type or Any()
        self._validate_types(elem_type)
        self.elem_type = elem_type  # type: Type
        """ Expected type of the list elements """

    def _instancecheck_impl(self, value, info: Info) -> InfoMsg:
        if not isinstance(value, list):
            return info.errormsg(self)
        for i, elem in enumerate(value):
            res = self.elem_type.__instancecheck__(elem, info.add_to_name("[{}]".format(i)))
            if not res:
                return res
        return info.wrap(True)

    def __str__(self) -> str:
        return "List({})".format(self.elem_type)

    def _eq_impl(self, other: 'List') -> bool:
        return other.elem_type == self.elem_type


class Tuple(Type):
    """
    Checks for the value to be a tuple (or a list) with elements of the given types.
    """

    def __init__(self, *elem_types: Type):
        super().__init__()
        self._validate_types(*elem_types)
        self.elem_types = elem_types  # type: t.Tuple[Type, ...]
        """ Expected type of each tuple element """

    def _instancecheck_impl(self, value, info: Info) -> InfoMsg:
        if not isinstance(value, (list, tuple)) or len(self.elem_types) != len(value):
            return info.errormsg(self)
        for i, elem in enumerate(value):
            res = self.elem_types[i].__instancecheck__(elem, info.add_to_name("[{}]".format(i)))
            if not res:
                return res
        return info.wrap(True)

    def __str__(self) -> str:
        return "Tuple({})".format(", ".join(str(typ) for typ in self.elem_types))

    def _eq_impl(self, other: 'Tuple') -> bool:
        return list(other.elem_types) == list(self.elem_types)


class _NonExistentVal(object):
    """
    Placeholder for a missing dictionary value.
    """

    def __repr__(self) -> str:
        return "<non existent>"


_non_existent_val = _NonExistentVal()


class NonExistent(Type):
    """
    Marks a dictionary key as optional if its associated value has this type (usually in an Either).
    """

    def _instancecheck_impl(self, value, info: Info) -> InfoMsg:
        return info.errormsg_cond(isinstance(value, _NonExistentVal), self)

    def __str__(self) -> str:
        return "non existent"

    def _eq_impl(self, other: 'NonExistent') -> bool:
        return True


class Dict(Type):
    """
    Checks for the value to be a dictionary with expected keys whose values satisfy the given types.
    """

    def __init__(self, data: t.Dict[t.Any, Type] = None, unknown_keys: bool = False, key_type: Type = None,
                 value_type: Type = None):
        """
        Creates a new instance.

        :param data: dictionary with the expected keys and the expected types of the associated values
        :param unknown_keys: allow keys that aren't in data?
        :param key_type: expected Type of all unknown dictionary keys
        :param value_type: expected Type of all unknown dictionary values
        """
        super().__init__()
        self.data = data or {}  # type: t.Dict[t.Any, Type]
        self.key_type = key_type or Any()  # type: Type
        self.value_type = value_type or Any()  # type: Type
        self._validate_types(*self.data.values())
        self._validate_types(self.key_type, self.value_type)
        self.unknown_keys = unknown_keys  # type: bool

    def _instancecheck_impl(self, value, info: Info) -> InfoMsg:
        if not isinstance(value, dict):
            return info.errormsg(self)
        for key, typ in self.data.items():
            key_info = info.add_to_name("[{!r}]".format(key))
            if key in value:
                res = typ.__instancecheck__(value[key], key_info)
                if not res:
                    return res
            elif not typ.__instancecheck__(_non_existent_val, NoInfo()):
                return key_info.errormsg_non_existent(typ)
        unknown = [key for key in value if key not in self.data]
        if unknown and not self.unknown_keys:
            return info.errormsg_unknown_keys(unknown)
        for key in unknown:
            res = self.key_type.__instancecheck__(key, info.add_to_name("(key={!r})".format(key)))
            if not res:
                return res
            res = self.value_type.__instancecheck__(value[key], info.add_to_name("[{!r}]".format(key)))
            if not res:
                return res
        return info.wrap(True)

    def __str__(self) -> str:
        data_str = ", ".join("{!r}: {}".format(key, self.data[key]) for key in self.data)
        return "Dict({{{}}}, unknown_keys={})".format(data_str, self.unknown_keys)

    def __getitem__(self, key) -> Type:
        if key in self.data:
            return self.data[key]
        if self.unknown_keys:
            return self.value_type
        return NonExistent()

    def __setitem__(self, key, value: Type):
        self._validate_types(value)
        self.data[key] = value

    def __contains__(self, key) -> bool:
        return key in self.data

    def _eq_impl(self, other: 'Dict') -> bool:
        return self.data == other.data and self.unknown_keys == other.unknown_keys

    def get_default(self) -> dict:
        default_dict = dict(self.default.default) if self.default is not None else {}
        for key in self.data:
            if key not in default_dict and self.data[key].has_default():
                default_dict[key] = self.data[key].get_default()
        return default_dict

    def has_default(self) -> bool:
        return self.default is not None or all(typ.has_default() for typ in self.data.values())

    def get_default_yaml(self, indents: int = 0, indentation: int = 4, str_list: bool = False,
                         defaults=None) -> t.Union[str, t.List[str]]:
        if defaults is None:
            defaults = self.get_default()
        strs = []
        simple = sorted(key for key in self.data if not isinstance(self.data[key], Dict))
        nested = sorted(key for key in self.data if isinstance(self.data[key], Dict))
        for key in simple + nested:
            if key not in defaults:
                continue
            strs.append("")
            typ = self.data[key]
            if typ.description is not None:
                strs.extend("# " + line for line in typ.description.split("\n"))
            if isinstance(typ, Dict) and len(typ.data) > 0:
                strs.append("{}:".format(key))
                strs.extend(typ.get_default_yaml(1, indentation, str_list=True, defaults=defaults[key]))
            else:
                strs.append("{}: {}".format(key, typ.get_default_yaml(defaults=defaults[key]).strip()))
        i_str = " " * indents * indentation
        ret_strs = [i_str + line if line else line for line in strs]
        return ret_strs if str_list else "\n".join(ret_strs)


class Int(Type):
    """
    Checks for the value to be of type int (but not bool) and to adhere to an optional constraint.
    """

    def __init__(self, constraint: t.Callable[[t.Any], bool] = None):
        super().__init__()
        self.constraint = constraint  # type: t.Optional[t.Callable[[t.Any], bool]]

    def _instancecheck_impl(self, value, info: Info) -> InfoMsg:
        if not isinstance(value, int) or isinstance(value, bool) \
                or (self.constraint is not None and not self.constraint(value)):
            return info.errormsg(self)
        return info.wrap(True)

    def __str__(self) -> str:
        return "Int({})".format("constraint=<function>" if self.constraint is not None else "")

    def _eq_impl(self, other: 'Int') -> bool:
        return other.constraint == self.constraint


class Str(Type):
    """
    Checks for the value to be a string and to adhere to an optional constraint.
    """

    def __init__(self, constraint: t.Callable[[t.Any], bool] = None):
        super().__init__()
        self.constraint = constraint  # type: t.Optional[t.Callable[[t.Any], bool]]

    def _instancecheck_impl(self, value, info: Info) -> InfoMsg:
        if not isinstance(value, str):
            return info.errormsg(self)
        if self.constraint is not None and not self.constraint(value):
            return info.errormsg(self)
        return info.wrap(True)

    def __str__(self) -> str:
        return "Str()"

    def _eq_impl(self, other: 'Str') -> bool:
        return self.constraint == other.constraint


class Bool(Type):
    """
    Checks for the value to be True or False.
    """

    def _instancecheck_impl(self, value, info: Info) -> InfoMsg:
        return info.errormsg_cond(isinstance(value, bool), self)

    def __str__(self) -> str:
        return "Bool()"

    def _eq_impl(self, other: 'Bool') -> bool:
        return True


def NonEmptyStr() -> Constraint:
    """
    Matches all strings that aren't empty.
    """
    return Constraint(lambda x: len(x) > 0, Str(), "non empty")


def verbose_isinstance(value, type: t.Union[Type, type], value_name: str = None) -> InfoMsg:
    """
    Verbose version of isinstance that returns an InfoMsg object.

    :param value: value to check
    :param type: type or Type to check for
    :param value_name: name of the passed value (improves the error message)
    """
    if not isinstance(type, Type):
        type = T(type)
    if not isinstance(value, type):
        return type.__instancecheck__(value, Info(value_name, value))
    return InfoMsg(True)


def typecheck(value, type: t.Union[Type, type], value_name: str = None):
    """
    Like verbose_isinstance but raises an error if the value hasn't the expected type.

    :raises: TypeError
    """
    ret = verbose_isinstance(value, type, value_name)
    if not ret:
        raise TypeError(str(ret))


def typecheck_locals(locals: t.Dict[str, t.Any] = None, **variables: t.Union[Type, type]):
    """
    Like typecheck but checks several local variables for their associated expected type::

        def func(a: str, b: int):
            typecheck_locals(a=Str(), b=Int())

    :param locals: dictionary to get the variable values from, defaults to the callers locals
    :param variables: variable names with their associated expected types
    :raises: TypeError
    """
    if locals is None:
        locals = inspect.currentframe().f_back.f_locals
    for var in variables:
        typecheck(locals[var], variables[var], value_name=var)

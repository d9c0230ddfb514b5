#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Provides the YAML user configuration reader with type-checked values.

## Overview

`Config` is a read-only view of a dict, which may contain other dicts, that
provides default values, mandatory values, and type-checking of values. The
awsprof CLI loads its user configuration from a YAML file with
`Config.from_file`.

Assuming the file '~/.awsprof.yaml' contains the following YAML:

    CLI:
      log_level: INFO
      region: us-east-1

Values are read with `Config.get` by specifying the keys leading to the value:

    c = Config.from_file(Path.home() / ".awsprof.yaml")
    assert c.get("CLI", "region", type=Str) == "us-east-1"
    assert c.get("CLI", "log_level", type=Choice("DEBUG", "INFO")) == "INFO"
    assert c.get("CLI", "sts_region", type=Str, default="us-east-1") == "us-east-1"

If a value does not match the expected type, a `TypeError` naming the keys is
raised. Custom types can be built by subclassing `Type` and implementing
`type_check` and `__str__`.
"""

import logging
import re
from functools import reduce
from pathlib import Path

import yaml

LOG = logging.getLogger(__name__)

# pylint: disable=unidiomatic-typecheck
#
# isinstance(True, int) is true, so exact types are compared in this module.
# True must not type check successfully against an int.


class Config:
    """A `Config` reads type-checked values from a Python dictionary."""

    @classmethod
    def from_file(cls, filename, must_exist=False):
        """Factory method to load a `Config` from a YAML file.

        If `must_exist` is true, a `FileNotFoundError` is raised if the file
        does not exist, otherwise an empty `Config` is returned.
        """
        path = Path(filename)

        if not path.is_file():
            if must_exist:
                raise FileNotFoundError(f"Config file not found: {filename}")
            LOG.debug("no config file at %s", path)
            return EmptyConfig

        LOG.debug("loading config from %s", path)
        with path.open(encoding="utf-8") as f:
            return cls(yaml.safe_load(f))

    def __init__(self, d):
        # An empty YAML document loads as None.
        self.conf = d or {}

    def get(self, *keys, default=None, type=None, must_exist=False):
        """Return the specified value from the `Config`.

        Specify the value to read by providing the keys required to reach it.
        If the value is not found, `default` is returned unless `must_exist` is
        `True`, in which case a `ValueError` is raised. If `type` is specified
        and the value does not match it, a `TypeError` is raised:

            c.get("CLI", "region", type=Str)
            c.get("CLI", "log_level", type=Choice("DEBUG", "INFO", "WARN", "ERROR"))
            c.get("CLI", "credentials_file", type=Str, default="~/.aws/credentials")
        """
        # pylint: disable=redefined-builtin

        # Follow the keys into the nested dicts. A missing key yields {}.
        try:
            value = reduce(lambda a, p: a.get(p, {}), keys, self.conf)
        except AttributeError as e:
            raise ValueError(
                f"Error in config: {'->'.join(keys[:-1])}: not a dictionary"
            ) from e

        if value == {}:
            if must_exist:
                raise ValueError(f"Error in config: {'->'.join(keys)}: must be set")
            value = default

        if value is None or not type:
            return value

        if type.type_check(value):
            return value

        raise TypeError(
            f"Error in config: {'->'.join(keys)}: not a {type}: {repr(value)}"
        )


EmptyConfig = Config({})
"""Singleton representing an empty `Config`."""


class Type:
    """Represents a type that can be used in type-check comparisons."""

    def type_check(self, obj):
        """Returns true if obj is a type matching this `Type`."""
        raise NotImplementedError

    def __str__(self):
        """Returns a string representing this `Type`."""
        raise NotImplementedError


class Or(Type):
    """Represents a type that is one of the `config_types`."""

    def __init__(self, *config_types):
        self.config_types = config_types

    def type_check(self, obj):
        return any(t.type_check(obj) for t in self.config_types)

    def __str__(self):
        s = " or ".join(str(t) for t in self.config_types)
        return "(" + s + ")"


class Const(Type):
    """Represents a constant value."""

    def __init__(self, const):
        self.const = const

    def type_check(self, obj):
        # True == 1 in python, so the types must match before the values.
        if type(obj) != type(self.const):  # noqa: E721
            return False
        return obj == self.const

    def __str__(self):
        return f"constant '{self.const}'"


class Choice(Or):
    """Represents a choice of constants."""

    def __init__(self, *constants):
        super().__init__(*[Const(c) for c in constants])


class Scalar(Type):
    """Represents a type that is a scalar matching the builtin `type_`."""

    def __init__(self, type_):
        self.type = type_

    def type_check(self, obj):
        return type(obj) == self.type  # noqa: E721

    def __str__(self):
        return self.type.__name__


class StrMatch(Type):
    """Represents a string matching `pattern`.

    `pattern` is matched using `re.search` so anchors should be explicit.
    """

    def __init__(self, pattern):
        self.pattern = pattern

    def type_check(self, obj):
        if type(obj) != str:  # noqa: E721
            return False
        return bool(re.search(self.pattern, obj))

    def __str__(self):
        return f"str matching '{self.pattern}'"


Str = Scalar(str)
"""Singleton representing a str."""

Region = StrMatch(r"^[a-z]{2}(-[a-z]+)+-\d+$")
"""Singleton representing an AWS region name such as us-east-1."""

LogLevel = Choice("DEBUG", "INFO", "WARN", "ERROR")
"""Singleton representing a logging level accepted by the CLI."""

#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Keep secrets out of logs, error messages, and the console.

A `Secret` wraps a sensitive string such as an AWS secret access key or a
session token. Formatting it with `str`, `repr`, or an f-string never shows the
value, so it is safe to pass secrets to loggers and exception messages:

    >>> key = Secret("wJalrXUtnFEMI/K7MDENG/bPxRfiCYEXAMPLEKEY")
    >>> print(f"secret is {key}")
    secret is ********
    >>> key.reveal()
    'wJalrXUtnFEMI/K7MDENG/bPxRfiCYEXAMPLEKEY'

When a diagnostic must hint at the shape of a value, such as the confirmation
prompt of the CLI, use `mask`, which replaces every character:

    >>> mask("abc123")
    '******'
"""

PLACEHOLDER = "*"

_REDACTED = PLACEHOLDER * 8


class Secret:
    """An opaque string that refuses to render its value."""

    __slots__ = ("_value",)

    def __init__(self, value):
        self._value = value.reveal() if isinstance(value, Secret) else value

    def reveal(self):
        """Returns the wrapped value."""
        return self._value

    def masked(self):
        """Returns the value with every character replaced."""
        return mask(self._value)

    def __str__(self):
        return _REDACTED

    def __repr__(self):
        return f"Secret('{_REDACTED}')"

    def __bool__(self):
        return bool(self._value)

    def __eq__(self, other):
        if isinstance(other, Secret):
            return self._value == other._value  # pylint: disable=protected-access
        return NotImplemented

    def __hash__(self):
        return hash(self._value)


def mask(value, placeholder=PLACEHOLDER):
    """Returns `value` with every character replaced by `placeholder`."""
    if isinstance(value, Secret):
        value = value.reveal()
    if value is None:
        return ""
    return placeholder * len(value)


def reveal(value):
    """Returns the plain string of `value`, which may or may not be a `Secret`."""
    return value.reveal() if isinstance(value, Secret) else value

#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Compose, parse, and classify `domain:role` profile names.

## Overview

Every profile managed by awsprof is named `domain:role`. The domain groups a
family of related profiles, while the role determines the kind of profile:

    >>> compose("work", "dev")
    'work:dev'
    >>> parse("work:dev")
    ('work', 'dev')
    >>> classify_kind("iam"), classify_kind("mfa"), classify_kind("dev")
    (<Kind.IAM: 'iam'>, <Kind.MFA: 'mfa'>, <Kind.ASSUME_ROLE: 'role'>)

There is no entity representing a domain. It is inferred by splitting the
names of the profiles. All functions in this module are pure.
"""

import enum

from awsprof.errors import ProfileError

SEPARATOR = ":"

IAM_ROLE = "iam"
MFA_ROLE = "mfa"


class Kind(enum.Enum):
    """The kind of a profile as derived from the role part of its name."""

    IAM = "iam"
    MFA = "mfa"
    ASSUME_ROLE = "role"

    def __str__(self):
        return self.value


def compose(domain, role):
    """Returns the profile name for `domain` and `role`.

    Raises `InvalidArgumentError` if either part is empty or contains the `:`
    separator.
    """
    for label, part in (("domain", domain), ("role", role)):
        if not part:
            raise InvalidArgumentError(f"{label} must not be empty")
        if SEPARATOR in part:
            raise InvalidArgumentError(
                f"{label} must not contain '{SEPARATOR}': {part}"
            )
    return f"{domain}{SEPARATOR}{role}"


def parse(name):
    """Returns a tuple of `(domain, role)` for the profile `name`.

    The name is split on the first `:`. Raises `InvalidFormatError` if there is
    no separator in the name.
    """
    if not name or SEPARATOR not in name:
        raise InvalidFormatError(name)
    domain, role = name.split(SEPARATOR, 1)
    return domain, role


def classify_kind(role):
    """Returns the `Kind` of profile for `role`."""
    if role == IAM_ROLE:
        return Kind.IAM
    if role == MFA_ROLE:
        return Kind.MFA
    return Kind.ASSUME_ROLE


def kind_of(name):
    """Returns the `Kind` of the profile `name`."""
    return classify_kind(parse(name)[1])


def iam_profile(domain):
    """Returns the name of the IAM user profile of `domain`."""
    return compose(domain, IAM_ROLE)


def mfa_profile(domain):
    """Returns the name of the MFA session profile of `domain`."""
    return compose(domain, MFA_ROLE)


class InvalidArgumentError(ProfileError):
    """Raised if a domain or role cannot be used in a profile name."""


class InvalidFormatError(ProfileError):
    """Raised if a profile name does not follow the `domain:role` format.

    The `name` attribute contains the offending name.
    """

    def __init__(self, name):
        self.name = name
        super().__init__(
            f"Invalid profile name {name!r}: expected 'domain{SEPARATOR}role'"
        )

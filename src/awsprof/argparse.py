#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Provides additional argument types and formatters for the builtin argparse module."""

import argparse

from awsprof import naming


class RawAndDefaultsFormatter(
    argparse.ArgumentDefaultsHelpFormatter, argparse.RawDescriptionHelpFormatter
):
    """Mixin of ArgumentDefaultsHelpFormatter and RawDescriptionHelpFormatter.

    The argparse module does not allow for easy combinations of help formatters.
    This class combines the raw formatter along with the default args formatter,
    which is used by awsprof CLI.
    """


def profile_name(value):
    """Argparse type that accepts only `domain:role` profile names.

        >>> parser = argparse.ArgumentParser()
        >>> parser.add_argument('profile', type=profile_name)
        >>> parser.parse_args(['work:dev'])
        Namespace(profile='work:dev')
        >>> parser.parse_args(['work'])
        usage: [-h] profile
        error: argument profile: invalid profile name 'work': expected 'domain:role'
    """
    try:
        naming.parse(value)
    except naming.InvalidFormatError:
        raise argparse.ArgumentTypeError(
            f"invalid profile name {value!r}: expected 'domain{naming.SEPARATOR}role'"
        ) from None
    return value


def name_part(value):
    """Argparse type for a domain or role, which cannot contain the separator."""
    if not value or naming.SEPARATOR in value:
        raise argparse.ArgumentTypeError(
            f"invalid name {value!r}: must not be empty or contain '{naming.SEPARATOR}'"
        )
    return value

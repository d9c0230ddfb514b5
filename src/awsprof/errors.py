#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Base exception shared by the awsprof modules.

Each module defines the exceptions it raises, but all of them derive from
`ProfileError`, so callers of the library can catch every awsprof failure with a
single except clause. Error messages name the profile and operation involved
and never include credentials.
"""


class ProfileError(Exception):
    """Base class of all errors raised by awsprof."""

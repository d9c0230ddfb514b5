#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Select the active profile used by the AWS CLI.

The AWS CLI and SDKs use the profile named by the `AWS_PROFILE` environment
variable whenever a profile is not explicitly specified. An
`ActiveProfileSelector` reads and writes that variable in the environment
mapping it was given, which defaults to the environment of the current process.

A child process cannot change the environment of the shell that started it,
so the CLI prints the command returned by `ActiveProfileSelector.export_command`
for the shell to evaluate:

    $ eval "$(awsprof use work:dev)"
"""

import logging
import os
import shlex

LOG = logging.getLogger(__name__)

ACTIVE_PROFILE_VAR = "AWS_PROFILE"


class ActiveProfileSelector:
    """Gets and sets the active profile in an environment mapping.

    Selecting a profile does not check that it exists, as a profile may be
    selected before it is created.
    """

    def __init__(self, environ=None):
        self._environ = os.environ if environ is None else environ

    def get_active(self):
        """Returns the name of the active profile or `None`."""
        return self._environ.get(ACTIVE_PROFILE_VAR) or None

    def set_active(self, name):
        """Makes `name` the active profile."""
        LOG.info("setting %s to %s", ACTIVE_PROFILE_VAR, name)
        self._environ[ACTIVE_PROFILE_VAR] = name

    def clear(self):
        """Unsets the active profile."""
        self._environ.pop(ACTIVE_PROFILE_VAR, None)

    @staticmethod
    def export_command(name):
        """Returns a POSIX shell command that makes `name` the active profile."""
        return f"export {ACTIVE_PROFILE_VAR}={shlex.quote(name)}"

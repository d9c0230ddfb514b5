#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#

# pylint: disable=redefined-outer-name,missing-docstring

import pytest

from awsprof.linker import ProfileLinker
from awsprof.store import ProfileStore


@pytest.fixture
def credentials_file(tmp_path):
    return tmp_path / "aws" / "credentials"


@pytest.fixture
def config_file(tmp_path):
    return tmp_path / "aws" / "config"


@pytest.fixture
def store(credentials_file, config_file):
    return ProfileStore(credentials_file, config_file)


@pytest.fixture
def linker(store):
    return ProfileLinker(store)

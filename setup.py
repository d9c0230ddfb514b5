#!/usr/bin/env python
# -*- encoding: utf-8 -*-

import io
import re
from os.path import dirname, join

from setuptools import find_packages, setup


def read(*names, **kwargs):
    return io.open(
        join(dirname(__file__), *names), encoding=kwargs.get("encoding", "utf8")
    ).read()


def find_version(*file_paths):
    contents = read(*file_paths)
    match = re.search(r"^__version__ = ['\"]([^'\"]*)['\"]", contents, re.M)
    if match:
        return match.group(1)
    raise RuntimeError("Unable to find version string.")


setup(
    name="awsprof",
    python_requires=">=3.8",
    version=find_version("src", "awsprof", "__init__.py"),
    license="MIT",
    description="CLI to manage linked AWS CLI profiles and MFA session tokens",
    long_description="""`awsprof` is both a CLI and library to manage AWS CLI
profiles named after a `domain:role` convention that links IAM user profiles,
MFA session profiles, and assume-role profiles. It selects the active profile
and refreshes MFA session tokens before they expire.""",
    long_description_content_type="text/markdown",
    author="awsprof developers",
    packages=find_packages("src"),
    package_dir={"": "src"},
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        # complete classifier list: http://pypi.python.org/pypi?%3Aaction=list_classifiers
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: Unix",
        "Operating System :: POSIX",
        "Operating System :: Microsoft :: Windows",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: Implementation :: CPython",
        "Topic :: Utilities",
    ],
    keywords=["awsprof", "aws", "mfa", "cli"],
    install_requires=[
        "boto3>=1.12.39",
        "PyYAML>=3.10",
    ],
    tests_require=["pytest", "pytest-mock", "freezegun"],
    extras_require={"test": ["pytest", "pytest-mock", "freezegun"]},
    entry_points={
        "console_scripts": [
            "awsprof = awsprof.cli:main",
        ]
    },
)

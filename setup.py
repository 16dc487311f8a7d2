# This file is part of rhsm-register. See LICENSE file for license information.

# Distutils magic for rhsm-register

import os
import sys

import setuptools

# Python-path here is a little unpredictable as setup.py could be run
# from a directory other than the root of the repo, so ensure we can find
# our utils
sys.path.insert(0, os.path.dirname(os.path.realpath(__file__)))
# isort: off
from setup_utils import get_version, read_requires  # noqa: E402

# isort: on
del sys.path[0]

ETC = "/etc"

data_files = [
    (ETC + "/rhsm-register", ["config/register.cfg"]),
]

setuptools.setup(
    name="rhsm-register",
    version=get_version(),
    description=(
        "Register hosts to Katello or Satellite 6 with subscription-manager"
    ),
    package_data={
        "": ["*.json"],
    },
    packages=setuptools.find_packages(exclude=["tests.*", "tests"]),
    license="Dual-licensed under GPLv3 or Apache 2.0",
    python_requires=">=3.8",
    data_files=data_files,
    install_requires=read_requires(),
    extras_require={"test": read_requires("test-requirements.txt")},
    entry_points={
        "console_scripts": [
            "rhsm-register = rhsmregister.cmd.main:main",
        ],
    },
)

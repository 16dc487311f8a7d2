import os
from typing import List

TOPDIR = os.path.dirname(os.path.realpath(__file__))


def get_version() -> str:
    """Read the version without importing the package."""
    scope: dict = {}
    with open(os.path.join(TOPDIR, "rhsmregister", "version.py")) as fp:
        exec(fp.read(), scope)  # nosec B102
    return scope["version_string"]()


def read_requires(fname: str = "requirements.txt") -> List[str]:
    deps = []
    with open(os.path.join(TOPDIR, fname)) as fp:
        for line in fp:
            line = line.split("#", 1)[0].strip()
            if line:
                deps.append(line)
    return deps

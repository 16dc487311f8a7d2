# This file is part of rhsm-register. See LICENSE file for license information.

import yaml


def dumps(obj, explicit_start=True, explicit_end=True):
    """Return data in nicely formatted yaml."""

    return yaml.dump(
        obj,
        line_break="\n",
        indent=4,
        explicit_start=explicit_start,
        explicit_end=explicit_end,
        default_flow_style=False,
        Dumper=yaml.dumper.SafeDumper,
    )

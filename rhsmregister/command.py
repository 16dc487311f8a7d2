# This file is part of rhsm-register. See LICENSE file for license information.
"""Build subscription-manager command lines."""

from typing import List

from rhsmregister.exceptions import ValidationError
from rhsmregister.resource import DesiredState


def build_register_args(desired: DesiredState) -> List[str]:
    """Build the arguments of a registration command.

    @raises: ValidationError when neither username+password nor
        activationkey is set, when activationkey comes with a username or
        password, or when org is missing.
    """
    if desired.uses_activationkey:
        conflict = bool(desired.username or desired.password)
    else:
        conflict = not desired.uses_credentials
    if conflict:
        raise ValidationError(
            "credential conflict: Either an activation key or"
            " username+password is required to register, not both."
        )
    if not desired.org:
        raise ValidationError(
            "missing org: The 'org' parameter is required to register"
            " the system"
        )
    args = ["register"]
    if desired.force:
        args.append("--force")
    if desired.uses_credentials:
        args.extend(["--username", desired.username])
        args.extend(["--password", desired.password])
        if desired.autosubscribe:
            args.append("--autosubscribe")
    else:
        # no autosubscribe with keys, see the attach step instead
        args.extend(["--activationkey", desired.activationkey])
    if desired.environment and not desired.uses_activationkey:
        args.extend(["--environment", desired.environment])
    args.extend(["--org", desired.org])
    return args


def build_attach_args(desired: DesiredState) -> List[str]:
    return ["attach", "--servicelevel=%s" % desired.servicelevel, "--auto"]


UNREGISTER_STEPS = (
    ["unsubscribe", "--all"],
    ["unregister"],
    ["clean"],
)

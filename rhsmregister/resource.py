# This file is part of rhsm-register. See LICENSE file for license information.
"""The desired registration of a host."""

import enum
from typing import NamedTuple, Optional, Set

from rhsmregister import util
from rhsmregister.exceptions import ValidationError
from rhsmregister.state import Presence


@enum.unique
class Ensure(enum.Enum):
    PRESENT = "present"
    ABSENT = "absent"


class DesiredState(NamedTuple):
    name: str
    ensure: Ensure = Ensure.PRESENT
    username: Optional[str] = None
    password: Optional[str] = None
    activationkey: Optional[str] = None
    org: Optional[str] = None
    environment: Optional[str] = None
    autosubscribe: bool = False
    servicelevel: Optional[str] = None
    force: bool = False

    @property
    def uses_credentials(self) -> bool:
        return bool(self.username) and bool(self.password)

    @property
    def uses_activationkey(self) -> bool:
        return bool(self.activationkey)

    def __repr__(self):
        # keep the password out of logs and tracebacks
        fields = self._asdict()
        if fields["password"]:
            fields["password"] = "<REDACTED>"
        return "DesiredState(%s)" % ", ".join(
            "%s=%r" % item for item in fields.items()
        )


STR_OPTIONS = (
    "username",
    "password",
    "activationkey",
    "org",
    "environment",
    "servicelevel",
)
BOOL_OPTIONS = ("autosubscribe", "force")


def from_config(cfg: dict, force: Optional[bool] = None) -> DesiredState:
    """Build the desired state from the rhsm_register config dict.

    @param force: when not None, overrides the configured force flag.

    @raises: ValidationError when name or ensure are unusable.
    """
    name = util.get_cfg_option_str(cfg, "name", "").strip()
    if not name:
        raise ValidationError(
            "The 'name' parameter is required: the hostname of the"
            " Katello or Satellite server"
        )
    ensure_value = util.get_cfg_option_str(cfg, "ensure", "present")
    try:
        ensure = Ensure(ensure_value.lower())
    except ValueError as e:
        raise ValidationError(
            "Invalid ensure value '%s', expected one of: %s"
            % (ensure_value, ", ".join(e.value for e in Ensure))
        ) from e

    options = {}
    for key in STR_OPTIONS:
        value = util.get_cfg_option_str(cfg, key)
        options[key] = value if value else None
    for key in BOOL_OPTIONS:
        options[key] = util.get_cfg_option_bool(cfg, key, False)
    if force is not None:
        options["force"] = force
    return DesiredState(name=name, ensure=ensure, **options)


def diff(desired: DesiredState, observed) -> Set[str]:
    """Return the names of the fields where observed differs from desired.

    Only the fields both records carry are compared: the server name and
    the presence of a registration. A broken registration still holds
    local state, so it is out of sync with ensure absent.
    """
    changed = set()
    want_present = desired.ensure == Ensure.PRESENT
    if want_present:
        if not observed.is_registered:
            changed.add("ensure")
    elif observed.presence != Presence.NO_RECORD:
        changed.add("ensure")
    if want_present and observed.name != desired.name:
        changed.add("name")
    return changed

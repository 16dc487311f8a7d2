# This file is part of rhsm-register. See LICENSE file for license information.
"""Observed registration state of this host."""

import enum
import logging
from typing import Dict, List, Mapping, NamedTuple

LOG = logging.getLogger(__name__)


@enum.unique
class Presence(enum.Enum):
    """How much of a registration the host holds."""

    # identity held, registration is valid
    PRESENT = "present"
    # a server name is known but no identity backs it
    ABSENT = "absent"
    # nothing is known, not reported as an instance
    NO_RECORD = "no-record"


class ObservedState(NamedTuple):
    name: str = ""
    identity: str = ""
    presence: Presence = Presence.NO_RECORD

    @property
    def is_registered(self) -> bool:
        return self.presence == Presence.PRESENT

    def as_dict(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "identity": self.identity,
            "ensure": self.presence.value,
        }


NO_RECORD = ObservedState()


def read_state(probe) -> ObservedState:
    """Get the registration as known to the system."""
    LOG.debug("Getting the registration settings as known to the system")
    name = probe.configured_hostname()
    if not name and probe.certs_present():
        name = probe.cached_ca_name()
    identity = probe.cached_identity()
    if identity:
        return ObservedState(name, identity, Presence.PRESENT)
    if name:
        LOG.debug("Registration to %s is broken: no identity", name)
        return ObservedState(name, "", Presence.ABSENT)
    return NO_RECORD


def instances(probe) -> List[ObservedState]:
    """Return the registrations present on this host, zero or one."""
    state = read_state(probe)
    if state.presence == Presence.NO_RECORD:
        return []
    return [state]


def prefetch(
    resources: Mapping[str, object], probe
) -> Dict[str, ObservedState]:
    """Match discovered registrations to the declared resources by name.

    @param resources: declared resources keyed by server name.
    @returns: the observed state of each declared resource that was found.
    """
    matched = {}
    for state in instances(probe):
        if state.name in resources:
            matched[state.name] = state
    return matched

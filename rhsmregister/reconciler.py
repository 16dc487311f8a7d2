# This file is part of rhsm-register. See LICENSE file for license information.
"""Converge the registration of this host to a desired state.

subscription-manager reports expected outcomes (stale local records,
re-registration to the same server, missing service levels) with the same
non-zero exit codes as real failures. Every action is therefore best effort:
a failing command is logged at debug level and the pass carries on. Only
refusals, a bad credential combination or re-registering to the same server
without force, stop a pass, and they do so before any command is run.
"""

import logging
from typing import List, Optional

from rhsmregister import settings, state
from rhsmregister.command import (
    UNREGISTER_STEPS,
    build_attach_args,
    build_register_args,
)
from rhsmregister.exceptions import RequiresForceError
from rhsmregister.facts import FactCache, FactProbe
from rhsmregister.resource import DesiredState, Ensure
from rhsmregister.submgr import SubscriptionManager
from rhsmregister.subp import ProcessExecutionError

LOG = logging.getLogger(__name__)

REGISTER = "register"
UNREGISTER = "unregister"
ATTACH = "attach"


class Reconciler:
    def __init__(self, probe, runner):
        self.probe = probe
        self.runner = runner

    def observe(self) -> state.ObservedState:
        return state.read_state(self.probe)

    def flush(
        self,
        desired: DesiredState,
        current: Optional[state.ObservedState] = None,
    ) -> List[str]:
        """Trigger the actions taking this host to the desired state.

        @param current: the state already observed in this pass, read from
            the host when None.
        @returns: the actions performed, in order.
        @raises: RequiresForceError when already registered to
            desired.name and force is not set.
        @raises: ValidationError when the register command cannot be built.
        """
        if desired.ensure == Ensure.ABSENT:
            self.unregister()
            return [UNREGISTER]

        if current is None:
            current = self.observe()
        actions = []
        if not current.is_registered:
            LOG.debug(
                "No valid registration, registering to %s", desired.name
            )
        elif current.name != desired.name:
            LOG.debug(
                "Changing servers from %s to %s", current.name, desired.name
            )
            # refuse before touching the current registration
            build_register_args(desired)
            self.unregister()
            actions.append(UNREGISTER)
        elif not desired.force:
            raise RequiresForceError(desired.name)
        else:
            LOG.debug("Forcing re-registration to %s", desired.name)
        self.register(desired)
        actions.append(REGISTER)
        if self.subscription_attach(desired):
            actions.append(ATTACH)
        return actions

    def register(self, desired: DesiredState):
        """Attempt to (re-)register with a Katello or Satellite 6 server."""
        args = build_register_args(desired)
        LOG.debug("This server will be registered to %s", desired.name)
        # Re-registration exits 1 for a new registration to a new server
        # over an old one, and 2 for re-registering to the same server
        # after an unregister.
        try:
            self.runner.execute(args)
        except ProcessExecutionError as e:
            LOG.debug("Registration returned: %s", e)

    def subscription_attach(self, desired: DesiredState) -> bool:
        """Attach to a service level when auto subscribing.

        A deployment with only custom products has no service levels, so
        this may fail.
        """
        if not (desired.autosubscribe and desired.servicelevel):
            return False
        LOG.debug(
            "This server will be attached to service level %s",
            desired.servicelevel,
        )
        try:
            self.runner.execute(build_attach_args(desired))
        except ProcessExecutionError as e:
            LOG.debug("Auto-attach returned: %s", e)
        return True

    def unregister(self):
        """Remove the registration locally and attempt to notify the server.

        Every step runs whatever the outcome of the previous ones.
        """
        LOG.debug("This server will be unregistered")
        for step in UNREGISTER_STEPS:
            try:
                result = self.runner.execute(
                    list(step), fail_on_error=False, combine=True
                )
            except ProcessExecutionError as e:
                LOG.debug("%s failed to run: %s", " ".join(step), e)
                continue
            if result.exit_code:
                LOG.debug(
                    "%s exited %s: %s",
                    " ".join(step),
                    result.exit_code,
                    result.output,
                )


def get_reconciler(cfg: dict, facts_file=None, runner=None) -> Reconciler:
    """Wire a Reconciler to this host's subscription-manager and facts."""
    if runner is None:
        runner = SubscriptionManager()
    facts = FactCache(
        facts_file or cfg.get("facts_file") or settings.FACTS_FILE
    )
    return Reconciler(FactProbe(runner, facts), runner)

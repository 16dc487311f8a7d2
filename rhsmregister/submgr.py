# This file is part of rhsm-register. See LICENSE file for license information.
"""Run subscription-manager with per-call failure tolerance."""

import logging
from typing import List, NamedTuple, Optional

from rhsmregister import settings, subp

LOG = logging.getLogger(__name__)

# Options whose following argument must not reach the logs
SECRET_OPTIONS = ("--password",)
MASK = "<REDACTED>"


class ExecResult(NamedTuple):
    exit_code: int
    output: str


def mask_secrets(cmd: List[str]) -> List[str]:
    masked = list(cmd)
    for idx, arg in enumerate(masked[:-1]):
        if arg in SECRET_OPTIONS:
            masked[idx + 1] = MASK
    for idx, arg in enumerate(masked):
        for opt in SECRET_OPTIONS:
            if arg.startswith(opt + "="):
                masked[idx] = opt + "=" + MASK
    return masked


class SubscriptionManager:
    """The subscription-manager command line tool.

    The binary is looked up once, when the runner is created, and every
    subcommand is run through subp with stdin closed.
    """

    def __init__(self, command: Optional[str] = None):
        if command is None:
            command = (
                subp.which(settings.SUBSCRIPTION_MANAGER)
                or settings.SUBSCRIPTION_MANAGER
            )
        self.command = command

    def execute(
        self, args: List[str], fail_on_error=True, combine=False
    ) -> ExecResult:
        """Run subscription-manager with args.

        @param fail_on_error: raise ProcessExecutionError on a non-zero exit.
            When False, the exit code and output are returned instead.
        @param combine: merge stderr into the returned output.

        @raises: ProcessExecutionError when the command cannot be run at all,
            or exits non-zero and fail_on_error is set.
        """
        cmd = [self.command] + list(args)
        masked = mask_secrets(cmd)
        logstring = masked if masked != cmd else False
        try:
            out, _err = subp.subp(cmd, combine=combine, logstring=logstring)
        except subp.ProcessExecutionError as e:
            if fail_on_error or not isinstance(e.exit_code, int):
                raise
            LOG.debug(
                "%s exited %s: %s", " ".join(masked), e.exit_code, e.output
            )
            return ExecResult(e.exit_code, e.output)
        return ExecResult(0, out)

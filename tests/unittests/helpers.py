# This file is part of rhsm-register. See LICENSE file for license information.

import json
import os
from typing import Dict, List, Tuple
from unittest import mock  # noqa: F401

from rhsmregister import subp
from rhsmregister.submgr import ExecResult


class FakeRunner:
    """Stands in for SubscriptionManager, recording every call.

    responses maps a subcommand to the (exit_code, output) it produces.
    Unlisted subcommands succeed with no output.
    """

    def __init__(self, responses: Dict[str, Tuple[int, str]] = None):
        self.responses = responses or {}
        self.calls: List[List[str]] = []

    def execute(self, args, fail_on_error=True, combine=False) -> ExecResult:
        args = list(args)
        self.calls.append(args)
        exit_code, output = self.responses.get(args[0], (0, ""))
        if exit_code and fail_on_error:
            raise subp.ProcessExecutionError(
                stdout=output, exit_code=exit_code, cmd=args
            )
        return ExecResult(exit_code, output)

    @property
    def subcommands(self) -> List[str]:
        return [call[0] for call in self.calls]


class FakeProbe:
    def __init__(self, hostname="", certs=False, ca_name="", identity=""):
        self.hostname = hostname
        self.certs = certs
        self.ca_name = ca_name
        self.identity = identity

    def configured_hostname(self):
        return self.hostname

    def certs_present(self):
        return self.certs

    def cached_ca_name(self):
        return self.ca_name

    def cached_identity(self):
        return self.identity


def write_facts(path, facts: dict) -> str:
    with open(path, "w") as stream:
        json.dump(facts, stream)
    return str(path)


def populate_dir(path, files):
    if not os.path.exists(path):
        os.makedirs(path)
    ret = []
    for name, content in files.items():
        p = os.path.sep.join([path, name])
        os.makedirs(os.path.dirname(p), exist_ok=True)
        with open(p, "w") as fp:
            fp.write(content)
        ret.append(p)

    return ret

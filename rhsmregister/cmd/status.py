#!/usr/bin/env python3

# This file is part of rhsm-register. See LICENSE file for license information.

"""Define 'status' utility and handler for the rhsm-register command line."""

import argparse
from typing import List

from rhsmregister import safeyaml, state, util
from rhsmregister.reconciler import get_reconciler

NO_REGISTRATION = "no registration found"

TABULAR_TMPL = """\
name: {name}
identity: {identity}
ensure: {ensure}"""


def get_parser(parser=None):
    """Build or extend an arg parser for status utility.

    @param parser: Optional existing ArgumentParser instance representing the
        status subcommand which will be extended to support the args of
        this utility.

    @returns: ArgumentParser with proper argument configuration.
    """
    if not parser:
        parser = argparse.ArgumentParser(
            prog="status",
            description="Report the registration known to this host",
        )
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "tabular", "yaml"],
        default="tabular",
        help="Specify output format for status (default: tabular)",
    )
    return parser


def format_instances(found: List[state.ObservedState], fmt: str) -> str:
    records = [s.as_dict() for s in found]
    if fmt == "json":
        return util.json_dumps(records)
    if fmt == "yaml":
        return safeyaml.dumps(records).rstrip("\n")
    if not records:
        return NO_REGISTRATION
    return "\n".join(TABULAR_TMPL.format(**record) for record in records)


def handle_status_args(name, args) -> int:
    """Handle calls to 'rhsm-register status' as a subcommand."""
    cfg = util.read_cfg(args.config_file)
    reconciler = get_reconciler(cfg, facts_file=args.facts_file)
    print(format_instances(state.instances(reconciler.probe), args.format))
    return 0

#!/usr/bin/env python3

# This file is part of rhsm-register. See LICENSE file for license information.

"""Define 'apply' utility and handler as part of rhsm-register command line."""

import argparse
import logging

from rhsmregister import resource, settings, util
from rhsmregister.config.schema import (
    SchemaValidationError,
    validate_config_schema,
)
from rhsmregister.exceptions import RegistrationError
from rhsmregister.log.log_util import error
from rhsmregister.reconciler import get_reconciler

LOG = logging.getLogger(__name__)


def get_parser(parser=None):
    """Build or extend an arg parser for apply utility.

    @param parser: Optional existing ArgumentParser instance representing the
        apply subcommand which will be extended to support the args of
        this utility.

    @returns: ArgumentParser with proper argument configuration.
    """
    if not parser:
        parser = argparse.ArgumentParser(
            prog="apply",
            description=(
                "Register, re-register or unregister this host to match"
                " the configured registration"
            ),
        )
    parser.add_argument(
        "--force",
        action="store_true",
        default=False,
        help=(
            "Re-register even when already registered to the configured"
            " server."
        ),
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Report what would change without running any command.",
    )
    return parser


def handle_apply_args(name, args) -> int:
    """Handle calls to 'rhsm-register apply' as a subcommand."""
    cfg = util.read_cfg(args.config_file)
    try:
        validate_config_schema(cfg, strict=True)
    except SchemaValidationError as e:
        return error(str(e))
    if not cfg.get(settings.CFG_KEY):
        return error(
            "No '%s' key found in configuration" % settings.CFG_KEY
        )
    try:
        desired = resource.from_config(
            cfg[settings.CFG_KEY], force=True if args.force else None
        )
    except RegistrationError as e:
        return error(str(e))

    reconciler = get_reconciler(cfg, facts_file=args.facts_file)
    current = reconciler.observe()
    changes = resource.diff(desired, current)
    if not changes and not desired.force:
        print("Registration to %s is in sync" % desired.name)
        return 0
    LOG.debug("Out of sync fields: %s", ", ".join(sorted(changes)))
    if args.dry_run:
        print(
            "Would converge %s (ensure %s, currently %s)"
            % (desired.name, desired.ensure.value, current.presence.value)
        )
        return 0

    try:
        actions = reconciler.flush(desired, current)
    except RegistrationError as e:
        return error(str(e))
    print("Applied %s: %s" % (desired.name, ", ".join(actions)))
    return 0

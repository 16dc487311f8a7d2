#!/usr/bin/env python3

# This file is part of rhsm-register. See LICENSE file for license information.

import argparse
import logging
import sys

from rhsmregister import settings, util, version
from rhsmregister.cmd import apply, status
from rhsmregister.config import schema
from rhsmregister.log import loggers
from rhsmregister.log.log_util import logexc

LOG = logging.getLogger(__name__)


def get_parser():
    parser = argparse.ArgumentParser(prog="rhsm-register")

    # Top level args
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version="%(prog)s " + (version.version_string()),
        help="Show program's version number and exit.",
    )
    parser.add_argument(
        "--debug",
        "-d",
        action="store_true",
        help="Show additional pre-action logging (default: %(default)s).",
        default=False,
    )
    parser.add_argument(
        "--config-file",
        "-c",
        dest="config_file",
        help=(
            "Use this yaml configuration file, merged with the files of its"
            " '.d' directory (default: %s)" % settings.REGISTER_CONFIG
        ),
        default=None,
    )
    parser.add_argument(
        "--facts-file",
        dest="facts_file",
        help="Read cached facts from this json file (default: %s)"
        % settings.FACTS_FILE,
        default=None,
    )

    subparsers = parser.add_subparsers(title="Subcommands", dest="subcommand")
    subparsers.required = True

    parser_apply = subparsers.add_parser(
        "apply", help="Converge the registration of this host."
    )
    apply.get_parser(parser_apply)
    parser_apply.set_defaults(action=("apply", apply.handle_apply_args))

    parser_status = subparsers.add_parser(
        "status", help="Report the registration known to this host."
    )
    status.get_parser(parser_status)
    parser_status.set_defaults(action=("status", status.handle_status_args))

    parser_schema = subparsers.add_parser(
        "schema", help="Validate the configuration against its schema."
    )
    schema.get_parser(parser_schema)
    parser_schema.set_defaults(action=("schema", schema.handle_schema_args))
    return parser


def main(sysv_args=None):
    loggers.configure_root_logger()
    if sysv_args is None:
        sysv_args = sys.argv[1:]
    parser = get_parser()
    args = parser.parse_args(args=sysv_args)
    return sub_main(args)


def sub_main(args):
    # Subparsers.required = True and each subparser sets action=(name, functor)
    (name, functor) = args.action

    # --debug logs everything to stderr, otherwise the configured
    # log_cfgs are used, falling back to warnings on stderr.
    if args.debug:
        loggers.setup_basic_logging(logging.DEBUG)
    else:
        loggers.setup_logging(util.read_cfg(args.config_file))

    try:
        retval = functor(name, args)
    except Exception as e:
        logexc(LOG, "Failed running %s: %s", name, e, log_level=logging.ERROR)
        retval = 1
    finally:
        loggers.flush_loggers(logging.getLogger())
    return retval


if __name__ == "__main__":
    sys.exit(main())

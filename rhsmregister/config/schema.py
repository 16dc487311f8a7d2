# This file is part of rhsm-register. See LICENSE file for license information.
"""schema.py: Set of module functions for processing register config schema."""
import argparse
import json
import logging
import os
import re
import sys
from typing import List, NamedTuple, Optional

import yaml
from jsonschema import Draft4Validator, FormatChecker

from rhsmregister import settings
from rhsmregister.log.log_util import error
from rhsmregister.util import load_text_file

LOG = logging.getLogger(__name__)

# When bumping schema version due to incompatible changes add a new
# schema-register-v#.json and point REGISTER_SCHEMA_FILE at it.
REGISTER_SCHEMA_FILE = "schema-register-v1.json"


class SchemaProblem(NamedTuple):
    path: str
    message: str

    def format(self) -> str:
        return f"{self.path}: {self.message}"


SchemaProblems = List[SchemaProblem]


class SchemaValidationError(ValueError):
    """Raised when validating a register config file against a schema."""

    def __init__(self, schema_errors: Optional[SchemaProblems] = None):
        """Init the exception an n-tuple of schema errors.

        @param schema_errors: An n-tuple of the format:
            ((flat.config.key, msg),)
        """
        self.schema_errors = sorted(set(schema_errors or []))
        super().__init__(
            "Register config schema errors: "
            + ", ".join(p.format() for p in self.schema_errors)
        )

    def has_errors(self) -> bool:
        return bool(self.schema_errors)


def get_schema_dir() -> str:
    return os.path.join(os.path.dirname(os.path.abspath(__file__)), "schemas")


def get_schema() -> dict:
    """Return the jsonschema for register configuration.

    Return empty schema when no schema file exists.
    """
    schema_file = os.path.join(get_schema_dir(), REGISTER_SCHEMA_FILE)
    try:
        return json.loads(load_text_file(schema_file))
    except (IOError, OSError):
        LOG.warning(
            "Skipping schema validation. No JSON schema file found %s.",
            schema_file,
        )
        return {}


def validate_config_schema(
    config: dict,
    schema: Optional[dict] = None,
    strict: bool = False,
    log_details: bool = True,
) -> bool:
    """Validate provided config meets the schema definition.

    @param config: Dict of register configuration settings validated against
        schema.
    @param schema: jsonschema dict describing the supported schema definition.
        If None, validate against the packaged schema.
    @param strict: Boolean, when True raise SchemaValidationErrors instead of
       logging warnings.
    @param log_details: Boolean, when True logs details of validation errors.
       Configs carry passwords, so callers may set this to False.

    @raises: SchemaValidationError when provided config does not validate
        against the provided schema and strict is True.
    @returns: True when the config is valid.
    """
    if schema is None:
        schema = get_schema()
    validator = Draft4Validator(schema, format_checker=FormatChecker())

    errors: SchemaProblems = []
    for schema_error in sorted(
        validator.iter_errors(config), key=lambda e: [str(p) for p in e.path]
    ):
        path = ".".join([str(p) for p in schema_error.path])
        if schema_error.validator == "additionalProperties":
            # report the unexpected key itself rather than its parent
            prop_match = re.match(
                r".*\('(?P<name>.*)' was unexpected\)", schema_error.message
            )
            if prop_match:
                path = ".".join(filter(None, [path, prop_match["name"]]))
        errors.append(SchemaProblem(path, schema_error.message))

    if not errors:
        return True
    if strict:
        raise SchemaValidationError(errors)
    if log_details:
        LOG.warning(str(SchemaValidationError(errors)))
    else:
        LOG.warning(
            "Invalid register config provided: Please run "
            "'sudo rhsm-register schema' to see the schema errors."
        )
    return False


def validate_config_file(config_path: str, schema: Optional[dict] = None):
    """Validate the register config file at config_path.

    @raises: SchemaValidationError on any schema problem, or when the file
        is not valid YAML.
    @raises: RuntimeError when the file is missing or not a YAML dict.
    """
    try:
        content = load_text_file(config_path)
    except (IOError, OSError) as e:
        raise RuntimeError(
            "Configfile {0} does not exist".format(config_path)
        ) from e
    try:
        config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        line = column = 1
        mark = getattr(e, "context_mark", None) or getattr(
            e, "problem_mark", None
        )
        if mark:
            line = mark.line + 1
            column = mark.column + 1
        raise SchemaValidationError(
            [
                SchemaProblem(
                    "format-l{line}.c{col}".format(line=line, col=column),
                    "File {0} is not valid YAML. {1}".format(
                        config_path, str(e)
                    ),
                )
            ]
        ) from e
    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise RuntimeError("{0} is not a YAML dict.".format(config_path))
    return validate_config_schema(config, schema, strict=True)


def get_parser(parser=None):
    """Return a parser for supported cmdline arguments."""
    if not parser:
        parser = argparse.ArgumentParser(
            prog="register-schema",
            description="Validate a register config file against its schema",
        )
    parser.add_argument(
        "-c",
        "--config-file",
        dest="schema_config_file",
        help=(
            "Path of the register config YAML file to validate. Default: %s"
            % settings.REGISTER_CONFIG
        ),
    )
    return parser


def handle_schema_args(name, args):
    """Handle provided schema args and perform the appropriate actions."""
    config_path = (
        getattr(args, "schema_config_file", None)
        or getattr(args, "config_file", None)
        or settings.REGISTER_CONFIG
    )
    try:
        validate_config_file(config_path)
    except SchemaValidationError as e:
        print(f"Invalid register config {config_path}")
        return error(str(e), fmt="Error: {}\n")
    except RuntimeError as e:
        return error(str(e), fmt="Error: {}\n")
    print(f"Valid schema {config_path}")
    return 0


def main():
    """Tool to validate schema of a register config file."""
    parser = get_parser()
    return handle_schema_args("register-schema", parser.parse_args())


if __name__ == "__main__":
    sys.exit(main())

# This file is part of rhsm-register. See LICENSE file for license information.

import collections.abc
import io
import logging
import logging.config
import os
import sys
import time
from contextlib import suppress

DEFAULT_LOG_FORMAT = "%(asctime)s - %(filename)s[%(levelname)s]: %(message)s"


def setup_basic_logging(level=logging.DEBUG, formatter=None):
    formatter = formatter or logging.Formatter(DEFAULT_LOG_FORMAT)
    root = logging.getLogger()
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    console.setLevel(level)
    root.addHandler(console)
    root.setLevel(level)


def flush_loggers(root):
    if not root:
        return
    for h in root.handlers:
        if isinstance(h, (logging.StreamHandler)):
            with suppress(IOError):
                h.flush()
    flush_loggers(root.parent)


def setup_logging(cfg=None, level=logging.WARNING):
    """Configure logging from the 'log_cfgs' entries of cfg.

    Each entry is either a path to a logging.config.fileConfig file or the
    content of one, possibly given as a list of lines. The first entry that
    loads wins. Without one, basic stderr logging at level is set up unless
    'log_basic' is false.
    """
    if not cfg:
        cfg = {}

    log_cfgs = []
    for a_cfg in cfg.get("log_cfgs") or []:
        if isinstance(a_cfg, str):
            log_cfgs.append(a_cfg)
        elif isinstance(a_cfg, (collections.abc.Iterable)):
            log_cfgs.append("\n".join([str(c) for c in a_cfg]))
        else:
            log_cfgs.append(str(a_cfg))

    for log_cfg in log_cfgs:
        # A handler pointing at a missing directory fails to load,
        # try the next configuration then.
        with suppress(FileNotFoundError):
            if not (log_cfg.startswith("/") and os.path.isfile(log_cfg)):
                log_cfg = io.StringIO(log_cfg)
            logging.config.fileConfig(log_cfg, disable_existing_loggers=False)
            return True

    if cfg.get("log_basic", True):
        setup_basic_logging(level)
    return False


def reset_logging():
    """Remove all current handlers and unset log level."""
    log = logging.getLogger()
    handlers = list(log.handlers)
    for h in handlers:
        h.flush()
        h.close()
        log.removeHandler(h)
    log.setLevel(logging.NOTSET)


def configure_root_logger():
    """Customize the root logger for rhsm-register"""

    # Always format logging timestamps as UTC time
    logging.Formatter.converter = time.gmtime
    reset_logging()

# This file is part of rhsm-register. See LICENSE file for license information.
"""Common utility functions for interacting with subprocess."""

import collections
import logging
import os
import subprocess
import time
from typing import List, Optional, Union

LOG = logging.getLogger(__name__)

SubpResult = collections.namedtuple("SubpResult", ["stdout", "stderr"])


class ProcessExecutionError(IOError):
    MESSAGE_TMPL = (
        "%(description)s\n"
        "Command: %(cmd)s\n"
        "Exit code: %(exit_code)s\n"
        "Reason: %(reason)s\n"
        "Stdout: %(stdout)s\n"
        "Stderr: %(stderr)s"
    )
    empty_attr = "-"

    def __init__(
        self,
        stdout=None,
        stderr=None,
        exit_code=None,
        cmd=None,
        description=None,
        reason=None,
        errno=None,
    ):
        self.cmd = cmd or self.empty_attr
        self.description = (
            description or "Unexpected error while running command."
        )
        self.exit_code = (
            exit_code if isinstance(exit_code, int) else self.empty_attr
        )
        # Raw output is kept for callers that inspect it, the message
        # gets an indented copy.
        self.output = stdout if stdout else ""
        self.stdout = self._indent_text(stdout) if stdout else (
            self.empty_attr if stdout is None else stdout
        )
        self.stderr = self._indent_text(stderr) if stderr else (
            self.empty_attr if stderr is None else stderr
        )
        self.reason = reason or self.empty_attr
        message = self.MESSAGE_TMPL % {
            "description": self.description,
            "cmd": self.cmd,
            "exit_code": self.exit_code,
            "stdout": self.stdout,
            "stderr": self.stderr,
            "reason": self.reason,
        }
        IOError.__init__(self, message)
        # IOError.__init__ resets errno
        if errno:
            self.errno = errno

    def _indent_text(self, text: str, indent_level=8) -> str:
        """
        indent text on all but the first line, allowing for easy to read output
        """
        return text.rstrip("\n").replace("\n", "\n" + " " * indent_level)


def raise_on_invalid_command(args: List[str]):
    """check argument types to ensure that subp() can run the argument

    raises: ProcessExecutionError with information explaining the issue
    """
    for component in args:
        if not isinstance(component, str):
            LOG.warning("Running invalid command: %s", args)
            raise ProcessExecutionError(
                cmd=args, reason=f"Running invalid command: {args}"
            )


def subp(
    args: List[str],
    *,
    rcs=None,
    capture=True,
    combine=False,
    logstring=False,
    update_env=None,
) -> SubpResult:
    """Run a subprocess.

    :param args: command to run in a list. [cmd, arg1, arg2...]
    :param rcs:
        a list of allowed return codes.  If subprocess exits with a value not
        in this list, a ProcessExecutionError will be raised.
    :param capture:
        boolean indicating if output should be captured.  If True, then stderr
        and stdout will be returned.  If False, they will not be redirected.
    :param combine:
        merge stderr into stdout.  The returned stderr is then empty.
    :param logstring:
        the command will be logged to DEBUG.  If it contains info that should
        not be logged, then logstring will be logged instead.
    :param update_env:
        update the environment for this command with this dictionary.
        this will not affect the current processes os.environ.

    :return
        if not capturing, return is (None, None)
        if capturing, stdout and stderr are returned as strings.
    """

    if rcs is None:
        rcs = [0]

    env = os.environ.copy()
    if update_env:
        env.update(update_env)

    LOG.debug(
        "Running command %s with allowed return codes %s"
        " (capture=%s, combine=%s)",
        logstring if logstring else args,
        rcs,
        capture,
        combine,
    )

    stdout = None
    stderr = None
    if capture:
        stdout = subprocess.PIPE
        stderr = subprocess.STDOUT if combine else subprocess.PIPE

    raise_on_invalid_command(args)
    shown = logstring if logstring else args
    try:
        before = time.monotonic()
        sp = subprocess.Popen(
            args,
            stdout=stdout,
            stderr=stderr,
            stdin=subprocess.DEVNULL,
            env=env,
        )
        out, err = sp.communicate()
        total = time.monotonic() - before
        if total > 0.1:
            LOG.debug("%s took %.3ss to run", shown, total)
    except OSError as e:
        raise ProcessExecutionError(
            cmd=shown,
            reason=e,
            errno=e.errno,
            stdout="-",
            stderr="-",
        ) from e

    out = out.decode("utf-8", "replace") if out is not None else out
    err = err.decode("utf-8", "replace") if err is not None else err
    if capture and combine:
        err = ""

    rc = sp.returncode
    if rc not in rcs:
        raise ProcessExecutionError(
            stdout=out, stderr=err, exit_code=rc, cmd=shown
        )
    return SubpResult(out, err)


def target_path(target=None, path=None):
    # return 'path' inside target, accepting target as None
    if target in (None, ""):
        target = "/"
    elif not isinstance(target, str):
        raise ValueError(f"Unexpected input for target: {target}")
    else:
        target = os.path.abspath(target)
        # abspath("//") returns "//" specifically for 2 slashes.
        if target.startswith("//"):
            target = target[1:]

    if not path:
        return target

    # os.path.join("/etc", "/foo") returns "/foo". Chomp all leading /.
    while len(path) and path[0] == "/":
        path = path[1:]
    return os.path.join(target, path)


def which(program, search=None, target=None) -> Optional[str]:
    target = target_path(target)

    if os.path.sep in program and is_exe(target_path(target, program)):
        return program

    if search is None:
        paths = [
            p.strip('"') for p in os.environ.get("PATH", "").split(os.pathsep)
        ]
        search = (
            paths if target == "/" else [p for p in paths if p.startswith("/")]
        )
    search = [os.path.abspath(p) for p in search]

    for path in search:
        ppath = os.path.sep.join((path, program))
        if is_exe(target_path(target, ppath)):
            return ppath

    return None


def is_exe(fpath: Union[str, os.PathLike]) -> bool:
    # return boolean indicating if fpath exists and is executable.
    return os.path.isfile(fpath) and os.access(fpath, os.X_OK)

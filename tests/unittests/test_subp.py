# This file is part of rhsm-register. See LICENSE file for license information.

"""Tests for rhsmregister.subp utils functions."""

import logging
import os
import stat

import pytest

from rhsmregister import subp
from tests.unittests.helpers import mock


class TestSubp:
    stdin2err = ["sh", "-c", "cat >&2"]
    printenv = ["sh", "-c", 'printf "%s" "$FOO"']

    @pytest.mark.allow_subp_for("sh")
    def test_subp_captures_stdout_and_stderr(self):
        out, err = subp.subp(["sh", "-c", "echo out; echo err >&2"])
        assert out == "out\n"
        assert err == "err\n"

    @pytest.mark.allow_subp_for("sh")
    def test_subp_combine_merges_stderr(self):
        out, err = subp.subp(
            ["sh", "-c", "echo out; echo err >&2"], combine=True
        )
        assert "out\n" in out
        assert "err\n" in out
        assert err == ""

    @pytest.mark.allow_subp_for("sh")
    def test_subp_stdin_is_closed(self):
        out, err = subp.subp(self.stdin2err)
        assert out == ""
        assert err == ""

    @pytest.mark.allow_subp_for("sh")
    def test_subp_update_env(self):
        out, _err = subp.subp(self.printenv, update_env={"FOO": "bar"})
        assert out == "bar"
        assert "FOO" not in os.environ or os.environ["FOO"] != "bar"

    @pytest.mark.allow_subp_for("sh")
    def test_subp_decodes_invalid_utf8(self):
        out, _err = subp.subp(["sh", "-c", r"printf '\377abc'"])
        assert out == "\ufffdabc"

    @pytest.mark.allow_subp_for("sh")
    def test_subp_raises_on_unexpected_exit(self):
        with pytest.raises(subp.ProcessExecutionError) as exc_info:
            subp.subp(["sh", "-c", "echo boom; exit 3"])
        assert exc_info.value.exit_code == 3
        assert exc_info.value.output == "boom\n"
        assert "Exit code: 3" in str(exc_info.value)

    @pytest.mark.allow_subp_for("sh")
    def test_subp_allowed_return_codes(self):
        out, _err = subp.subp(["sh", "-c", "echo ok; exit 2"], rcs=[0, 2])
        assert out == "ok\n"

    @pytest.mark.allow_subp_for("sh")
    def test_subp_logstring_hides_args(self, caplog):
        with caplog.at_level(logging.DEBUG):
            with pytest.raises(subp.ProcessExecutionError) as exc_info:
                subp.subp(
                    ["sh", "-c", "exit 1", "s3cret"],
                    logstring=["sh", "-c", "exit 1", "<REDACTED>"],
                )
        assert "s3cret" not in caplog.text
        assert "s3cret" not in str(exc_info.value)

    @pytest.mark.allow_all_subp
    def test_subp_missing_command(self):
        with pytest.raises(subp.ProcessExecutionError) as exc_info:
            subp.subp(["/nonexistent/subscription-manager", "clean"])
        assert exc_info.value.exit_code == "-"
        assert exc_info.value.errno == 2

    def test_subp_rejects_non_string_args(self):
        with pytest.raises(subp.ProcessExecutionError) as exc_info:
            subp.raise_on_invalid_command(["sh", 1])
        assert "Running invalid command" in str(exc_info.value)

    def test_subp_is_blocked_without_marker(self):
        with pytest.raises(BaseException, match="Unexpectedly used subp"):
            subp.subp(["sh", "-c", "true"])


class TestProcessExecutionError:
    def test_keeps_errno(self):
        error = subp.ProcessExecutionError(cmd=["x"], errno=2)
        assert error.errno == 2

    def test_indents_multiline_output(self):
        error = subp.ProcessExecutionError(
            stdout="line1\nline2\n", stderr="", exit_code=1, cmd=["x"]
        )
        assert error.stdout == "line1\n        line2"
        assert error.output == "line1\nline2\n"
        assert error.stderr == ""

    def test_unset_attributes(self):
        error = subp.ProcessExecutionError()
        assert error.exit_code == "-"
        assert error.cmd == "-"
        assert error.output == ""
        assert "Unexpected error while running command." in str(error)


class TestWhich:
    def test_finds_executable_on_search_path(self, tmp_path):
        exe = tmp_path / "subscription-manager"
        exe.write_text("#!/bin/sh\n")
        exe.chmod(exe.stat().st_mode | stat.S_IEXEC)
        assert subp.which(
            "subscription-manager", search=[str(tmp_path)]
        ) == str(exe)

    def test_skips_non_executable(self, tmp_path):
        (tmp_path / "subscription-manager").write_text("")
        assert (
            subp.which("subscription-manager", search=[str(tmp_path)])
            is None
        )

    @mock.patch.dict(os.environ, {"PATH": "/nonexistent"})
    def test_missing_program(self):
        assert subp.which("subscription-manager") is None


class TestTargetPath:
    @pytest.mark.parametrize(
        "target,path,expected",
        (
            (None, None, "/"),
            (None, "/etc/rhsm", "/etc/rhsm"),
            ("/target", "/etc/rhsm", "/target/etc/rhsm"),
            ("//target", None, "/target"),
        ),
    )
    def test_target_path(self, target, path, expected):
        assert subp.target_path(target, path) == expected

    def test_rejects_non_string_target(self):
        with pytest.raises(ValueError):
            subp.target_path(1)

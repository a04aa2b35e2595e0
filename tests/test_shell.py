"""Tests for running converters under resource limits (uses /bin/sh)."""

import sys
import time

import pytest

from molthumb.converter.shell import ShellResult, run_with_limits

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="needs a POSIX shell")


def test_success_captures_output():
    result = run_with_limits("echo hello", 307200, 10)
    assert result == ShellResult(returncode=0, output="hello\n")


def test_stderr_merged_into_output():
    result = run_with_limits("echo oops 1>&2; exit 3", 307200, 10)
    assert result.returncode == 3
    assert "oops" in result.output
    assert not result.timed_out


def test_writes_output_file(tmp_path):
    out = tmp_path / "out.svg"
    result = run_with_limits(f"printf '<svg/>' > {out}", 307200, 10)
    assert result.returncode == 0
    assert out.read_text() == "<svg/>"


def test_timeout_reported_not_raised():
    result = run_with_limits("sleep 5", 307200, 1)
    assert result.returncode != 0
    assert result.timed_out
    assert "timed out after 1s" in result.output


def test_missing_program_fails():
    result = run_with_limits("/nonexistent/indigo-depict a b", 307200, 10)
    assert result.returncode != 0
    assert result.output


def test_timeout_kills_whole_pipeline():
    start = time.monotonic()
    result = run_with_limits("sleep 30 | cat", 307200, 1)
    assert result.timed_out
    assert time.monotonic() - start < 15

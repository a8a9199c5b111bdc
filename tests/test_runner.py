from __future__ import annotations

import sys

import pytest

from saydone.runner.command import CommandError, run_command


def test_runs_program_with_arguments_verbatim(logger):
    result = run_command(
        [sys.executable, "-c", "import sys; print(sys.argv[1:])", "a b", "--flag", "", "c"],
        logger=logger,
    )

    assert result.succeeded
    assert result.returncode == 0
    assert result.output == b"['a b', '--flag', '', 'c']\n"
    assert result.elapsed is not None


def test_merges_stdout_and_stderr(logger):
    script = (
        "import sys\n"
        "sys.stdout.write('out\\n'); sys.stdout.flush()\n"
        "sys.stderr.write('err\\n'); sys.stderr.flush()\n"
        "sys.stdout.write('done\\n')\n"
    )
    result = run_command([sys.executable, "-c", script], logger=logger)
    assert result.output == b"out\nerr\ndone\n"


def test_non_zero_exit_raises_with_output(logger):
    with pytest.raises(CommandError) as excinfo:
        run_command(
            [sys.executable, "-c", "print('partial'); raise SystemExit(3)"],
            logger=logger,
        )

    result = excinfo.value.result
    assert result.returncode == 3
    assert result.output == b"partial\n"
    assert not result.succeeded
    assert result.describe_failure() == "exit status 3"


def test_missing_program_raises(logger):
    with pytest.raises(CommandError) as excinfo:
        run_command(["saydone-no-such-program-xyz"], logger=logger)

    result = excinfo.value.result
    assert result.returncode is None
    assert result.output == b""
    assert result.describe_failure() == "could not be started"


def test_timeout_is_a_command_failure(logger):
    script = "import time; print('started', flush=True); time.sleep(30)"
    with pytest.raises(CommandError) as excinfo:
        run_command([sys.executable, "-c", script], timeout=1, logger=logger)

    result = excinfo.value.result
    assert result.timed_out
    assert result.returncode is None
    assert result.output == b"started\n"
    assert result.describe_failure() == "timed out"
    assert "timed out" in str(excinfo.value)


def test_empty_argv_is_rejected(logger):
    with pytest.raises(ValueError):
        run_command([], logger=logger)

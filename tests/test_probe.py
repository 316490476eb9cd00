# Tests for the Codex CLI probe
import subprocess
from unittest.mock import MagicMock, patch

from codexmate.probe import check_cli


def _completed(returncode: int, stdout: str = "", stderr: str = "") -> MagicMock:
    result = MagicMock()
    result.returncode = returncode
    result.stdout = stdout
    result.stderr = stderr
    return result


def test_installed_reports_version() -> None:
    with patch("codexmate.probe.subprocess.run", return_value=_completed(0, "codex-cli 0.46.0\n")) as mock_run:
        result = check_cli()

    assert result.installed
    assert result.version == "codex-cli 0.46.0"
    assert result.error is None
    assert mock_run.call_args.args[0] == ["codex", "--version"]


def test_version_on_stderr() -> None:
    with patch("codexmate.probe.subprocess.run", return_value=_completed(0, "", "codex 1.0\n")):
        result = check_cli()

    assert result.installed
    assert result.version == "codex 1.0"


def test_nonzero_exit_uses_stderr() -> None:
    with patch("codexmate.probe.subprocess.run", return_value=_completed(1, "", "boom\n")):
        result = check_cli()

    assert not result.installed
    assert result.error == "boom"


def test_nonzero_exit_without_stderr() -> None:
    with patch("codexmate.probe.subprocess.run", return_value=_completed(127)):
        result = check_cli()

    assert result.error == "exit 127"


def test_missing_binary() -> None:
    with patch("codexmate.probe.subprocess.run", side_effect=FileNotFoundError()):
        result = check_cli("codex")

    assert not result.installed
    assert result.error == "command not found: codex"


def test_timeout() -> None:
    with patch(
        "codexmate.probe.subprocess.run",
        side_effect=subprocess.TimeoutExpired(cmd="codex", timeout=2),
    ):
        result = check_cli(timeout=2)

    assert not result.installed
    assert result.error == "codex --version timed out after 2 seconds"


def test_real_missing_binary() -> None:
    """No mocking: a binary that cannot exist."""
    result = check_cli("codexmate-test-binary-that-does-not-exist")

    assert not result.installed
    assert result.error == "command not found: codexmate-test-binary-that-does-not-exist"

# ABOUTME: Detects whether the Codex CLI binary is installed
# ABOUTME: Runs `codex --version` and reports the version or why it failed
import subprocess

from codexmate.models import CliCheckResult

CLI_BINARY = "codex"
PROBE_TIMEOUT = 10  # seconds


def check_cli(binary: str = CLI_BINARY, timeout: int | None = None) -> CliCheckResult:
    """Probe the Codex CLI.

    ABOUTME: Non-zero exit reports stderr (or the exit code) as the error
    ABOUTME: Some builds print the version on stderr, so it is the fallback

    Args:
        binary: Executable name or path
        timeout: Seconds to wait (default: PROBE_TIMEOUT)

    Returns:
        CliCheckResult with installed/version/error

    Examples:
        >>> check_cli()
        CliCheckResult(installed=True, version='codex-cli 0.46.0', error=None)
    """
    if timeout is None:
        timeout = PROBE_TIMEOUT

    try:
        completed = subprocess.run(
            [binary, "--version"],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        return CliCheckResult(installed=False, error=f"command not found: {binary}")
    except PermissionError:
        return CliCheckResult(installed=False, error=f"permission denied executing: {binary}")
    except subprocess.TimeoutExpired:
        return CliCheckResult(installed=False, error=f"{binary} --version timed out after {timeout} seconds")
    except OSError as e:
        return CliCheckResult(installed=False, error=str(e))

    if completed.returncode != 0:
        stderr = (completed.stderr or "").strip()
        return CliCheckResult(installed=False, error=stderr or f"exit {completed.returncode}")

    version = (completed.stdout or "").strip() or (completed.stderr or "").strip()
    return CliCheckResult(installed=True, version=version)

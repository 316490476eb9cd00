# ABOUTME: Tests for the codexmate CLI
# ABOUTME: Drives main() against a tmp_path Codex directory and checks output + exit codes
import io
import json
from pathlib import Path
from unittest.mock import patch

import pytest

from codexmate.cli import EXIT_CONFIG_ERROR, EXIT_FATAL, EXIT_SUCCESS, build_parser, main
from codexmate.models import CliCheckResult


@pytest.fixture
def codex_home(tmp_path: Path) -> Path:
    return tmp_path / ".codex"


def run(codex_home: Path, *argv: str) -> int:
    return main(["--codex-home", str(codex_home), "--no-backup", *argv])


class TestParser:
    """Tests for argument parsing."""

    def test_version(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc:
            build_parser().parse_args(["--version"])
        assert exc.value.code == 0
        assert "codexmate v" in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys) -> None:
        assert main([]) == EXIT_SUCCESS
        assert "usage:" in capsys.readouterr().out

    def test_add_requires_base_url(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["nodes", "add", "acme"])

    def test_auth_flag_tristate(self) -> None:
        parser = build_parser()
        assert parser.parse_args(["nodes", "edit", "x"]).requires_openai_auth is None
        assert parser.parse_args(["nodes", "edit", "x", "--requires-openai-auth"]).requires_openai_auth is True
        assert parser.parse_args(["nodes", "edit", "x", "--no-requires-openai-auth"]).requires_openai_auth is False


class TestCheck:
    """Tests for the check command."""

    def test_installed(self, codex_home: Path, capsys) -> None:
        with patch("codexmate.cli.check_cli", return_value=CliCheckResult(installed=True, version="codex 0.46.0")):
            assert run(codex_home, "check") == EXIT_SUCCESS
        assert "codex installed: codex 0.46.0" in capsys.readouterr().out

    def test_not_installed(self, codex_home: Path, capsys) -> None:
        with patch(
            "codexmate.cli.check_cli",
            return_value=CliCheckResult(installed=False, error="command not found: codex"),
        ):
            assert run(codex_home, "check") == EXIT_CONFIG_ERROR
        assert "command not found: codex" in capsys.readouterr().out


class TestNodes:
    """Tests for the nodes command."""

    def test_add_switch_list(self, codex_home: Path, capsys) -> None:
        assert run(
            codex_home, "nodes", "add", "acme",
            "--base-url", "https://api.acme.dev/v1",
            "--key", "sk-acme",
            "--set", "stream_max_retries=5",
        ) == EXIT_SUCCESS
        assert run(codex_home, "nodes", "switch", "acme") == EXIT_SUCCESS
        capsys.readouterr()

        assert run(codex_home, "nodes", "list") == EXIT_SUCCESS
        out = capsys.readouterr().out

        assert "* acme" in out
        assert "base_url: https://api.acme.dev/v1" in out
        assert "credential: yes" in out
        assert 'model_provider = "acme"' in (codex_home / "config.toml").read_text()
        assert "stream_max_retries = 5" in (codex_home / "config.toml").read_text()
        assert json.loads((codex_home / "auth.json").read_text()) == {"OPENAI_API_KEY": "sk-acme"}

    def test_list_empty(self, codex_home: Path, capsys) -> None:
        assert run(codex_home, "nodes", "list") == EXIT_SUCCESS
        assert "No providers configured." in capsys.readouterr().out

    def test_add_duplicate(self, codex_home: Path, capsys) -> None:
        run(codex_home, "nodes", "add", "acme", "--base-url", "https://a.dev")

        assert run(codex_home, "nodes", "add", "acme", "--base-url", "https://b.dev") == EXIT_CONFIG_ERROR
        assert "Error: provider already exists" in capsys.readouterr().out

    def test_add_bad_url_warns(self, codex_home: Path, capsys) -> None:
        assert run(codex_home, "nodes", "add", "acme", "--base-url", "ftp://a.dev") == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "Warning: URL should use HTTP or HTTPS scheme" in out
        assert "Provider 'acme' added." in out

    def test_malformed_set_is_config_error(self, codex_home: Path, capsys) -> None:
        assert run(codex_home, "nodes", "add", "acme", "--base-url", "https://a.dev", "--set", "oops") == EXIT_CONFIG_ERROR
        assert "Error: Expected KEY=VALUE, got 'oops'" in capsys.readouterr().out
        assert not (codex_home / "config.toml").exists()

    def test_malformed_set_on_edit(self, codex_home: Path, capsys) -> None:
        run(codex_home, "nodes", "add", "acme", "--base-url", "https://a.dev")

        assert run(codex_home, "nodes", "edit", "acme", "--set", "oops") == EXIT_CONFIG_ERROR
        assert "Expected KEY=VALUE" in capsys.readouterr().out

    def test_edit_and_unset(self, codex_home: Path) -> None:
        run(codex_home, "nodes", "add", "acme", "--base-url", "https://a.dev", "--set", "env_key=ACME")

        assert run(
            codex_home, "nodes", "edit", "acme",
            "--wire-api", "chat",
            "--no-requires-openai-auth",
            "--unset", "env_key",
        ) == EXIT_SUCCESS

        text = (codex_home / "config.toml").read_text()
        assert 'wire_api = "chat"' in text
        assert "requires_openai_auth = false" in text
        assert "env_key" not in text

    def test_switch_unknown(self, codex_home: Path, capsys) -> None:
        assert run(codex_home, "nodes", "switch", "ghost") == EXIT_CONFIG_ERROR
        assert "Provider not found: ghost" in capsys.readouterr().out

    def test_remove_active_warns(self, codex_home: Path, capsys) -> None:
        run(codex_home, "nodes", "add", "acme", "--base-url", "https://a.dev")
        run(codex_home, "nodes", "switch", "acme")
        capsys.readouterr()

        assert run(codex_home, "nodes", "remove", "acme") == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "Provider 'acme' removed." in out
        assert "it was the active provider" in out

    def test_corrupt_credentials_is_fatal(self, codex_home: Path, capsys) -> None:
        (codex_home / "codex-mate").mkdir(parents=True)
        (codex_home / "codex-mate" / "credentials.json").write_text("{not json")

        assert run(codex_home, "nodes", "list") == EXIT_FATAL
        assert "Fatal error: Invalid JSON" in capsys.readouterr().out


class TestMcp:
    """Tests for the mcp command."""

    def test_add_and_list(self, codex_home: Path, capsys) -> None:
        with patch("codexmate.utils.validation.shutil.which", return_value="/usr/bin/npx"):
            assert run(
                codex_home, "mcp", "add", "github",
                "--command", "npx",
                "--args", "-y,@modelcontextprotocol/server-github",
                "--env", "GITHUB_TOKEN=ghp_xxxx",
            ) == EXIT_SUCCESS
        capsys.readouterr()

        assert run(codex_home, "mcp", "list") == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "github" in out
        assert "args: -y @modelcontextprotocol/server-github" in out
        assert "env: GITHUB_TOKEN=ghp_xxxx" in out
        assert "Total: 1 server(s)" in out

    def test_add_context7_twice(self, codex_home: Path, capsys) -> None:
        assert run(codex_home, "mcp", "add-context7") == EXIT_SUCCESS
        assert run(codex_home, "mcp", "add-context7") == EXIT_CONFIG_ERROR
        assert "mcp server already exists" in capsys.readouterr().out

    def test_edit_and_remove(self, codex_home: Path) -> None:
        run(codex_home, "mcp", "add", "fs", "--command", "npx")

        assert run(codex_home, "mcp", "edit", "fs", "--command", "node") == EXIT_SUCCESS
        assert 'command = "node"' in (codex_home / "config.toml").read_text()

        assert run(codex_home, "mcp", "remove", "fs") == EXIT_SUCCESS
        assert run(codex_home, "mcp", "remove", "fs") == EXIT_CONFIG_ERROR


class TestProjects:
    """Tests for the projects command."""

    def test_trust_list_remove(self, codex_home: Path, tmp_path: Path, capsys) -> None:
        project = tmp_path / "my.app"

        assert run(codex_home, "projects", "trust", str(project)) == EXIT_SUCCESS
        assert f'[projects."{project}"]' in (codex_home / "config.toml").read_text()
        capsys.readouterr()

        assert run(codex_home, "projects", "list") == EXIT_SUCCESS
        assert f"{project}: trusted" in capsys.readouterr().out

        assert run(codex_home, "projects", "remove", str(project)) == EXIT_SUCCESS
        assert run(codex_home, "projects", "list") == EXIT_SUCCESS
        assert "Total: 0 project(s)" in capsys.readouterr().out

    def test_relative_path_made_absolute(self, codex_home: Path, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)

        assert run(codex_home, "projects", "trust", "app", "--level", "untrusted") == EXIT_SUCCESS
        assert f'[projects."{tmp_path / "app"}"]' in (codex_home / "config.toml").read_text()


class TestConfig:
    """Tests for the config command."""

    def test_show_missing(self, codex_home: Path, capsys) -> None:
        assert run(codex_home, "config", "show") == EXIT_SUCCESS
        assert capsys.readouterr().out == ""

    def test_edit_from_file(self, codex_home: Path, tmp_path: Path, capsys) -> None:
        source = tmp_path / "new.toml"
        source.write_text('model = "o3"\n')

        assert run(codex_home, "config", "edit", str(source)) == EXIT_SUCCESS
        capsys.readouterr()

        assert run(codex_home, "config", "show") == EXIT_SUCCESS
        assert capsys.readouterr().out == 'model = "o3"\n'

    def test_edit_from_stdin(self, codex_home: Path, monkeypatch) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO('approval_policy = "never"'))

        assert run(codex_home, "config", "edit", "-") == EXIT_SUCCESS
        assert (codex_home / "config.toml").read_text() == 'approval_policy = "never"\n'

    def test_edit_invalid_toml(self, codex_home: Path, tmp_path: Path, capsys) -> None:
        source = tmp_path / "bad.toml"
        source.write_text("model = \n")

        assert run(codex_home, "config", "edit", str(source)) == EXIT_CONFIG_ERROR
        assert "Error: Invalid TOML" in capsys.readouterr().out
        assert not (codex_home / "config.toml").exists()

    def test_edit_missing_file_is_fatal(self, codex_home: Path, tmp_path: Path, capsys) -> None:
        assert run(codex_home, "config", "edit", str(tmp_path / "nope.toml")) == EXIT_FATAL
        assert "Fatal error" in capsys.readouterr().out


def test_backups_taken_by_default(codex_home: Path) -> None:
    main(["--codex-home", str(codex_home), "nodes", "add", "a", "--base-url", "https://a.dev"])
    main(["--codex-home", str(codex_home), "nodes", "add", "b", "--base-url", "https://b.dev"])

    backups = list((codex_home / "codex-mate" / "backups").glob("config_*.toml"))
    assert len(backups) == 1

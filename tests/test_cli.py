"""Tests for validatable CLI commands."""

import pytest
from click.testing import CliRunner

from validatable.cli.main import cli
from validatable.localization import LocalizationFactory

USER_TABLE = """\
type: User
fields:
  email:
    - kind: value_present
      message: E-Mail can not be left blank.
      severity: error
  password:
    - kind: string_length_greater_than
      min: 6
      validateIf: email
      message: Password must be greater than 6 characters.
      severity: error
    - kind: custom_handler
      delegate: CheckPassword
      severity: warning
"""


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Isolate the CLI from the caller's environment."""
    for name in ("VALIDATABLE_RULES_PATH", "VALIDATABLE_LOCALE_PATH", "VALIDATABLE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    LocalizationFactory.reset()
    yield
    LocalizationFactory.reset()


@pytest.fixture
def rules_dir(tmp_path):
    directory = tmp_path / "rules"
    directory.mkdir()
    (directory / "user.yaml").write_text(USER_TABLE)
    return directory


class TestRulesValidate:
    def test_validate_succeeds(self, runner, rules_dir):
        result = runner.invoke(cli, ["rules", "validate", "--path", str(rules_dir)])
        assert result.exit_code == 0
        assert "All rule tables are valid" in result.output

    def test_validate_shows_tables(self, runner, rules_dir):
        result = runner.invoke(cli, ["rules", "validate", "--path", str(rules_dir)])
        assert "Loaded 1 rule table(s)" in result.output
        assert "User (2 fields, 3 rules)" in result.output

    def test_validate_uses_environment_path(self, runner, rules_dir, monkeypatch):
        monkeypatch.setenv("VALIDATABLE_RULES_PATH", str(rules_dir))
        result = runner.invoke(cli, ["rules", "validate"])
        assert result.exit_code == 0
        assert "User" in result.output

    def test_validate_defaults_to_cwd_rules(self, runner, rules_dir, monkeypatch):
        monkeypatch.chdir(rules_dir.parent)
        result = runner.invoke(cli, ["rules", "validate"])
        assert result.exit_code == 0

    def test_schema_errors_fail(self, runner, rules_dir):
        (rules_dir / "bad.yaml").write_text(
            "type: Order\n"
            "fields:\n"
            "  quantity:\n"
            "    - kind: number_less_than\n"
        )

        result = runner.invoke(cli, ["rules", "validate", "--path", str(rules_dir)])

        assert result.exit_code == 1
        assert "'severity' is a required property" in result.output
        assert "schema error(s) found" in result.output

    def test_semantic_errors_fail(self, runner, rules_dir):
        (rules_dir / "user_again.yaml").write_text(USER_TABLE)

        result = runner.invoke(cli, ["rules", "validate", "--path", str(rules_dir)])

        assert result.exit_code == 1
        assert "Semantic validation failed" in result.output
        assert "Duplicate rule table for 'User'" in result.output

    def test_rule_construction_errors_fail(self, runner, rules_dir):
        (rules_dir / "order.yaml").write_text(
            "type: Order\n"
            "fields:\n"
            "  reference:\n"
            "    - kind: string_length_less_than\n"
            "      max: twelve\n"
            "      severity: error\n"
        )

        result = runner.invoke(cli, ["rules", "validate", "--path", str(rules_dir)])

        assert result.exit_code == 1
        assert "Order.reference[0]" in result.output
        assert "1 rule error(s) found" in result.output

    def test_missing_path_rejected(self, runner, tmp_path):
        result = runner.invoke(cli, ["rules", "validate", "--path", str(tmp_path / "nowhere")])
        assert result.exit_code != 0


class TestRulesShow:
    def test_show_lists_fields_and_rules(self, runner, rules_dir):
        result = runner.invoke(cli, ["rules", "show", "--path", str(rules_dir)])

        assert result.exit_code == 0
        assert "User" in result.output
        assert "  email" in result.output
        assert "    - value_present [error]" in result.output
        assert "    - string_length_greater_than [error] if email" in result.output
        assert "    - custom_handler [warning]" in result.output

    def test_show_empty_directory(self, runner, tmp_path):
        result = runner.invoke(cli, ["rules", "show", "--path", str(tmp_path)])
        assert result.exit_code == 0
        assert "No rule tables found." in result.output

    def test_show_load_failure(self, runner, rules_dir):
        (rules_dir / "broken.yaml").write_text("fields: {}\n")

        result = runner.invoke(cli, ["rules", "show", "--path", str(rules_dir)])

        assert result.exit_code == 1
        assert "Failed to load rule tables" in result.output


class TestCLIEntryPoint:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "rules" in result.output

    def test_locale_catalog_is_installed(self, runner, rules_dir, tmp_path, monkeypatch):
        catalog = tmp_path / "en.yaml"
        catalog.write_text("user:\n  email_required: Please enter an e-mail.\n")
        monkeypatch.setenv("VALIDATABLE_LOCALE_PATH", str(catalog))

        result = runner.invoke(cli, ["rules", "show", "--path", str(rules_dir)])

        assert result.exit_code == 0
        service = LocalizationFactory.create_service()
        assert service.lookup("user.email_required") == "Please enter an e-mail."

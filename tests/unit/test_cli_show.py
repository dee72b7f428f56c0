"""Tests for the CLI show command.

This module tests the `classschema show` command: plain text and JSON output,
exit codes and error reporting.
"""

import json

from click.testing import CliRunner
import pytest

from classschema.cli import main
from classschema.cli.show import show_command


# Global fixtures for all test classes
@pytest.fixture
def runner():
    """Create CLI runner for tests."""
    return CliRunner()


class TestCLIShowBasics:
    """Test basic CLI show command functionality."""

    def test_show_command_exists(self):
        """Test that the show command can be imported."""
        assert show_command is not None
        assert callable(show_command)

    def test_group_lists_show(self, runner):
        """Test the command group exposes the show command."""
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "show" in result.output

    def test_version(self, runner):
        """Test the version option."""
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestCLIShowOutput:
    """Test rendered schemas."""

    def test_plain_output(self, runner):
        """Test plain text output for non-interactive terminals."""
        result = runner.invoke(show_command, ["blog.domain.model.Post"])

        assert result.exit_code == 0
        assert "Class: blog.domain.model.Post" in result.output
        assert "Classification: entity, aggregate root" in result.output
        assert (
            "comments: classschema.domain.object_storage.ObjectStorage "
            "of blog.domain.model.Comment" in result.output
        )
        assert "validate: StringLength" in result.output

    def test_plain_output_for_controller(self, runner):
        """Test inject methods and parameters are listed."""
        result = runner.invoke(show_command, ["blog.controller:PostController"])

        assert result.exit_code == 0
        assert "Inject methods: inject_logger, injectMailer" in result.output
        assert "title: str [validate: NotEmpty, StringLength]" in result.output
        assert "post: blog.domain.model.Post [ignore validation]" in result.output

    def test_json_output(self, runner):
        """Test JSON output is the schema description."""
        result = runner.invoke(show_command, ["blog.domain.model.Tag", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["class_name"] == "blog.domain.model.Tag"
        assert data["value_object"] is True
        assert [prop["name"] for prop in data["properties"]] == ["name", "uid", "pid"]

    def test_rich_output(self, runner):
        """Test forced rich formatting renders the tables."""
        result = runner.invoke(
            show_command, ["blog.domain.model.Post", "--force-colors"]
        )

        assert result.exit_code == 0
        assert "Properties" in result.output
        assert "Methods" in result.output

    def test_through_group(self, runner):
        """Test the command runs through the command group."""
        result = runner.invoke(main, ["show", "blog.domain.model.Tag", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.output)["class_name"] == "blog.domain.model.Tag"


class TestCLIShowErrors:
    """Test exit codes and error reporting."""

    def test_unknown_class(self, runner):
        """Test an unknown class exits with code 1."""
        result = runner.invoke(show_command, ["blog.domain.model.Missing"])

        assert result.exit_code == 1
        assert "does not exist" in result.output

    def test_unknown_class_json(self, runner):
        """Test errors are reported as JSON with --json."""
        result = runner.invoke(show_command, ["blog.domain.model.Missing", "--json"])

        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["status"] == "error"
        assert data["error_type"] == "UnknownClassError"

    def test_invalid_declaration(self, runner):
        """Test a broken declaration exits with code 1."""
        result = runner.invoke(
            show_command, ["blog.broken.missing_param.MissingParamController"]
        )

        assert result.exit_code == 1
        assert "titel" in result.output

    def test_missing_argument(self, runner):
        """Test the class argument is required."""
        result = runner.invoke(show_command, [])

        assert result.exit_code == 2

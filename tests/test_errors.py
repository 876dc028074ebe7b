"""Tests for error kinds."""
import pytest

from eos_eapi.errors import (
    CommandError,
    ConfigError,
    EapiConnectionError,
    EapiError,
    SectionNotFound,
    StateError,
    UsageError,
    infer_failed_index,
)


class TestInferFailedIndex:
    """Tests for the failing command heuristic."""

    def test_single_error_points_at_last_command(self):
        """One error in a batch of four points at index 3."""
        assert infer_failed_index(4, 1) == 3

    def test_trailing_errors(self):
        """Errors for the failing and all later commands."""
        assert infer_failed_index(4, 2) == 2

    def test_clamped_into_batch(self):
        """More errors than commands still yields a valid index."""
        assert infer_failed_index(2, 5) == 0
        assert infer_failed_index(3, 0) == 2

    def test_empty_batch(self):
        """No commands, no index."""
        assert infer_failed_index(0, 1) is None


class TestCommandError:
    """Tests for CommandError."""

    def test_failed_command(self):
        """The failing command is looked up in the batch."""
        error = CommandError(
            1002,
            "CLI command 3 of 4 'bogus' failed: invalid command",
            errors=["Invalid input (at token 0: 'bogus')"],
            commands=["enable", "configure", "bogus", "hostname x"],
        )

        assert error.failed_index == 3
        assert error.failed_command == "hostname x"
        assert error.command_error == "Invalid input (at token 0: 'bogus')"

    def test_explicit_index_wins(self):
        """An index reported by the transport is kept."""
        error = CommandError(1002, "failed", errors=["x"], commands=["a", "b", "c"], failed_index=1)
        assert error.failed_command == "b"

    def test_str_contains_host_and_errors(self):
        """String form names host, code and per-command errors."""
        error = CommandError(1002, "failed", errors=["bad"], host="leaf1")
        text = str(error)

        assert text.startswith("[leaf1]")
        assert "1002" in text
        assert "bad" in text

    def test_command_error_falls_back_to_message(self):
        """Without per-command errors the message is used."""
        error = CommandError(1000, "General error")
        assert error.command_error == "General error"
        assert error.failed_command is None


class TestHierarchy:
    """Errors map onto builtin exceptions."""

    @pytest.mark.parametrize("cls,builtin", [
        (EapiConnectionError, ConnectionError),
        (UsageError, ValueError),
        (StateError, RuntimeError),
        (SectionNotFound, LookupError),
    ])
    def test_builtin_bases(self, cls, builtin):
        """Each error is also the matching builtin."""
        assert issubclass(cls, builtin)
        assert issubclass(cls, EapiError)

    def test_config_error(self):
        """ConfigError carries its host prefix."""
        assert str(ConfigError("missing", host="spine1")) == "[spine1] missing"

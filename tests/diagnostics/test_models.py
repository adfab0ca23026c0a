"""
Tests for diagnostic records and severity.
"""

import pytest

from promptweave.diagnostics.models import Diagnostic, Severity, is_warning_code, severity_for


class TestSeverity:
    """Severity is derived from the diagnostic code."""

    @pytest.mark.parametrize("code", ["warn_missing_task", "warn_conflicting_instructions", "validation_warning"])
    def test_warning_codes(self, code):
        assert is_warning_code(code)
        assert severity_for(code) is Severity.WARNING

    @pytest.mark.parametrize("code", ["runtime_error", "missing", "invalid_name", "warning", "my_warn_x"])
    def test_error_codes(self, code):
        assert not is_warning_code(code)
        assert severity_for(code) is Severity.ERROR


class TestDiagnostic:
    """Tests for the Diagnostic record."""

    def test_severity_derived(self):
        assert Diagnostic("warn_x", "m").is_warning
        assert not Diagnostic("runtime_error", "m").is_warning

    def test_explicit_severity_kept(self):
        diagnostic = Diagnostic("warn_x", "m", severity=Severity.ERROR)
        assert not diagnostic.is_warning

    def test_promoted(self):
        """Promotion keeps the code and changes only the severity."""
        promoted = Diagnostic("warn_x", "m", component="Format").promoted()
        assert promoted.code == "warn_x"
        assert promoted.component == "Format"
        assert promoted.severity is Severity.ERROR

    def test_path_normalized_to_tuple(self):
        assert Diagnostic("missing", "m", path=["a", 0]).path == ("a", 0)

    def test_str_mentions_location(self):
        text = str(Diagnostic("missing", "Card: attribute 'title': Field required", component="Card", prop="title"))
        assert "missing" in text
        assert "<Card>" in text
        assert "'title'" in text

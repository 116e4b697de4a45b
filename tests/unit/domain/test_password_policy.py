"""Unit tests for the password strength policy."""

import pytest

from tranquilo_auth.domain.services import PasswordPolicy


class TestPasswordPolicy:
    """Test password strength rules."""

    def test_minimal_compliant_password_is_accepted(self):
        is_valid, errors = PasswordPolicy.validate("Abcdef1!")

        assert is_valid
        assert errors == []

    def test_lowercase_only_password_is_rejected(self):
        is_valid, errors = PasswordPolicy.validate("abcdefgh")

        assert not is_valid
        assert any("uppercase" in e for e in errors)
        assert any("number" in e for e in errors)
        assert any("special character" in e for e in errors)

    @pytest.mark.parametrize(
        "password,missing",
        [
            ("Abcde1!", "at least 8 characters"),
            ("abcdef1!", "uppercase"),
            ("ABCDEF1!", "lowercase"),
            ("Abcdefg!", "number"),
            ("Abcdefg1", "special character"),
        ],
    )
    def test_each_rule_is_reported(self, password, missing):
        is_valid, errors = PasswordPolicy.validate(password)

        assert not is_valid
        assert len(errors) == 1
        assert missing in errors[0]

    def test_whitespace_is_rejected(self):
        is_valid, errors = PasswordPolicy.validate("Abc def1!")

        assert not is_valid
        assert any("whitespace" in e for e in errors)

    def test_password_at_byte_limit_is_accepted(self):
        is_valid, _ = PasswordPolicy.validate("Abcdef1!" * 9)

        assert is_valid

    @pytest.mark.parametrize("password", ["Abcdef1!" * 9 + "x", "Abcdef1!" + "ç" * 33])
    def test_password_over_byte_limit_is_rejected(self, password):
        is_valid, errors = PasswordPolicy.validate(password)

        assert not is_valid
        assert errors == ["Password must be at most 72 bytes long"]

    @pytest.mark.parametrize("symbol", list(PasswordPolicy.SYMBOLS))
    def test_every_listed_symbol_counts(self, symbol):
        is_valid, _ = PasswordPolicy.validate(f"Abcdef1{symbol}")

        assert is_valid

    def test_unlisted_punctuation_does_not_count_as_symbol(self):
        is_valid, errors = PasswordPolicy.validate('Abcdef1"')

        assert not is_valid
        assert any("special character" in e for e in errors)

    def test_empty_password_reports_every_missing_rule(self):
        is_valid, errors = PasswordPolicy.validate("")

        assert not is_valid
        assert len(errors) == 5

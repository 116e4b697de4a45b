"""
Unit tests for the User entity.

Covers the reset pair invariant, reset token matching and expiry, and the
public profile that is returned to callers.
"""

from datetime import UTC, datetime, timedelta

import pytest

from tranquilo_auth.domain.entities import PROFILE_FIELDS, User


class TestUserCreation:
    """Test building users from registration fields."""

    def test_create_copies_identity_and_profile(self, registration_fields):
        user = User.create(registration_fields, "$2b$04$hash")

        assert user.cpf == registration_fields["cpf"]
        assert user.email == registration_fields["email"]
        assert user.password_hash == "$2b$04$hash"
        for name in PROFILE_FIELDS:
            assert getattr(user, name) == registration_fields[name]

    def test_new_user_has_no_pending_reset(self, registration_fields):
        user = User.create(registration_fields, "hash")

        assert user.reset_token is None
        assert user.reset_expires_at is None
        assert not user.has_pending_reset

    def test_non_string_profile_values_are_stringified(self, registration_fields):
        registration_fields["number"] = 42

        user = User.create(registration_fields, "hash")

        assert user.number == "42"

    def test_created_at_is_timezone_aware(self, registration_fields):
        user = User.create(registration_fields, "hash")

        assert user.created_at.tzinfo is not None


class TestResetPairInvariant:
    """The reset token and its expiry are set and cleared together."""

    def test_token_without_expiry_is_rejected(self):
        with pytest.raises(ValueError, match="set or cleared together"):
            User(reset_token="abc")

    def test_expiry_without_token_is_rejected(self):
        with pytest.raises(ValueError):
            User(reset_expires_at=datetime.now(UTC))

    def test_both_set_is_allowed(self):
        user = User(reset_token="abc", reset_expires_at=datetime.now(UTC))

        assert user.has_pending_reset


class TestResetTokenChecks:
    """Test token matching and expiry checks."""

    @pytest.fixture
    def pending_user(self):
        return User(
            reset_token="a1b2c3",
            reset_expires_at=datetime(2024, 5, 1, 13, 0, tzinfo=UTC),
        )

    def test_exact_token_matches(self, pending_user):
        assert pending_user.reset_token_matches("a1b2c3")

    def test_different_token_does_not_match(self, pending_user):
        assert not pending_user.reset_token_matches("a1b2c4")
        assert not pending_user.reset_token_matches("A1B2C3")
        assert not pending_user.reset_token_matches("")

    def test_no_pending_token_never_matches(self):
        assert not User().reset_token_matches("anything")

    def test_not_expired_before_expiry(self, pending_user):
        assert not pending_user.reset_is_expired(pending_user.reset_expires_at)
        assert not pending_user.reset_is_expired(
            pending_user.reset_expires_at - timedelta(seconds=1)
        )

    def test_expired_after_expiry(self, pending_user):
        assert pending_user.reset_is_expired(pending_user.reset_expires_at + timedelta(seconds=1))


class TestPublicProfile:
    """The public profile never exposes credential or reset fields."""

    def test_profile_excludes_secrets(self, registration_fields):
        user = User.create(registration_fields, "secret-hash")
        user.reset_token = "token"
        user.reset_expires_at = datetime.now(UTC)

        profile = user.public_profile()

        assert "password_hash" not in profile
        assert "reset_token" not in profile
        assert "reset_expires_at" not in profile
        assert "secret-hash" not in profile.values()
        assert profile["id"] == str(user.id)
        assert profile["email"] == registration_fields["email"]
        assert profile["city"] == registration_fields["city"]

    def test_repr_hides_hash(self, registration_fields):
        user = User.create(registration_fields, "secret-hash")

        assert "secret-hash" not in repr(user)

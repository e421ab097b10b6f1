"""Tests for username and password validation."""

import pytest

from doorman.core.modules.user.validators import validate_email, validate_password, validate_username
from doorman.errors import InvalidInputError, ReservedIdentityError, WeakCredentialError

RESERVED = ["admin", "user"]


class TestValidatePassword:
    @pytest.mark.parametrize("password", ["", "a", "1234567"])
    def test_short_password_is_weak(self, password):
        with pytest.raises(WeakCredentialError, match="at least 8 characters"):
            validate_password(password, 8)

    def test_minimum_length_is_accepted(self):
        validate_password("12345678", 8)

    def test_too_long_for_bcrypt(self):
        with pytest.raises(InvalidInputError, match="at most 72 bytes"):
            validate_password("x" * 73, 8)

    def test_length_is_counted_in_bytes(self):
        # 37 two-byte characters is 74 bytes
        with pytest.raises(InvalidInputError):
            validate_password("й" * 37, 8)


class TestValidateUsername:
    @pytest.mark.parametrize("username", ["admin", "Admin", "SUPERADMIN", "my_user_1", "UserName"])
    def test_reserved_words_rejected_case_insensitively(self, username):
        with pytest.raises(ReservedIdentityError):
            validate_username(username, RESERVED)

    def test_plain_username_accepted(self):
        validate_username("alice", RESERVED)

    def test_empty_reserved_list_allows_anything(self):
        validate_username("admin", [])

    @pytest.mark.parametrize("username", ["", "   "])
    def test_blank_username_rejected(self, username):
        with pytest.raises(InvalidInputError, match="Username is required"):
            validate_username(username, RESERVED)


def test_blank_email_rejected():
    with pytest.raises(InvalidInputError, match="Email is required"):
        validate_email(" ")

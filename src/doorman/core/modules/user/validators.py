from doorman.errors import InvalidInputError, ReservedIdentityError, WeakCredentialError

# bcrypt only looks at the first 72 bytes and newer releases refuse longer input
MAX_PASSWORD_BYTES = 72


def validate_password(password: str, min_length: int) -> None:
    """Validate password length.

    Raises:
        WeakCredentialError: If password is shorter than min_length
        InvalidInputError: If password is longer than bcrypt accepts
    """
    if len(password) < min_length:
        raise WeakCredentialError(f"Password must be at least {min_length} characters long")

    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise InvalidInputError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")


def validate_username(username: str, reserved_words: list[str]) -> None:
    """Validate username is present and free of reserved words.

    Reserved words are matched as case-insensitive substrings, so with
    ``["admin"]`` both ``Admin`` and ``superadmin42`` are rejected.

    Raises:
        InvalidInputError: If username is empty or only whitespace
        ReservedIdentityError: If username contains a reserved word
    """
    if not username.strip():
        raise InvalidInputError("Username is required")

    lowered = username.lower()
    if any(word.lower() in lowered for word in reserved_words if word):
        raise ReservedIdentityError("Username contains a reserved word")


def validate_email(email: str) -> None:
    if not email.strip():
        raise InvalidInputError("Email is required")

from datetime import UTC, datetime


def now() -> datetime:
    return datetime.now(UTC)


def redact_email(email: str) -> str:
    """Shorten an email address for logs: ``alice@x.com`` -> ``al***@x.com``."""
    if "@" not in email:
        return "redacted"
    local, domain = email.split("@", 1)
    return f"{local[:2]}***@{domain}"

from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str
    port: int
    debug: bool
    base_url: str  # Externally reachable address used in reset links, e.g. https://doorman.example.com
    cors_origins: list[str] = []
    # Sessions
    session_max_age: int = 3600  # Seconds; also the cookie max-age and the TTL index expiry
    session_cookie_name: str = "auth_token"
    secure_cookies: bool = False  # Set to True in production with HTTPS
    # Credentials
    bcrypt_rounds: int = 10
    min_password_length: int = 8
    reserved_username_words: list[str] = ["admin", "user"]  # Case-insensitive substrings, empty list disables
    # Password reset
    reset_token_ttl: int = 3600  # Seconds a reset token stays usable
    reveal_unknown_email: bool = True  # False answers forgot-password with success for unknown addresses
    # Outgoing mail; without smtp_host reset mails are only logged
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_use_tls: bool = True  # STARTTLS when True, implicit TLS otherwise
    mail_from: str = "no-reply@localhost"
    mail_timeout: float = 10.0  # Seconds before a send is abandoned

    model_config = {
        "env_file": [".env"],
        "env_prefix": "DOORMAN_",
        "extra": "ignore",
    }

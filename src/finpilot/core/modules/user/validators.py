from finpilot.errors import ValidationError

MIN_PASSWORD_LENGTH = 6


def validate_password(password: str) -> None:
    """Validate password meets requirements.

    Raises:
        ValidationError: If password is shorter than MIN_PASSWORD_LENGTH
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def default_display_name(email: str, name: str | None) -> str:
    """Use the given name, or the local part of the email when it is blank."""
    if name and name.strip():
        return name.strip()
    return email.split("@", 1)[0]

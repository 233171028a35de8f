from loyalty.errors import ValidationError


def validate_username(username: str) -> str:
    """Return the trimmed username, rejecting blank input."""
    username = username.strip()
    if not username:
        raise ValidationError("Username cannot be empty")
    return username


def validate_password(password: str) -> None:
    """Validate password meets requirements.

    Requirements:
    - No whitespace characters
    - Minimum length of 8 characters

    Raises:
        ValidationError: If password doesn't meet requirements
    """
    if len(password) < 8:
        raise ValidationError("Password must be at least 8 characters long")

    if any(char.isspace() for char in password):
        raise ValidationError("Password cannot contain whitespace characters")

"""Secure admin password generation.

Generates passwords for the VM admin account that satisfy Azure's password
rules (12-72 characters, at least 3 of: lowercase, uppercase, digit, special).
Generated passwords always contain all four classes.

Security:
- Uses the secrets module (CSPRNG) for every random choice, including the shuffle
- Passwords are never logged
"""

import logging
import secrets
import string

logger = logging.getLogger(__name__)

LOWERCASE = string.ascii_lowercase
UPPERCASE = string.ascii_uppercase
DIGITS = string.digits
SPECIAL_CHARACTERS = "!@#$%^&*()_+-=[]{}|;:,.<>?"

CHARACTER_CLASSES: tuple[str, ...] = (LOWERCASE, UPPERCASE, DIGITS, SPECIAL_CHARACTERS)
ALL_CHARACTERS = "".join(CHARACTER_CLASSES)

DEFAULT_PASSWORD_LENGTH = 16

# Azure admin password rules
AZURE_MIN_PASSWORD_LENGTH = 12
AZURE_MAX_PASSWORD_LENGTH = 72
AZURE_REQUIRED_CLASSES = 3

_system_random = secrets.SystemRandom()


def generate_secure_password(length: int = DEFAULT_PASSWORD_LENGTH) -> str:
    """Generate a random password containing every character class.

    One character is drawn from each class, the remaining positions are drawn
    from the union of all classes, and the result is shuffled.

    Args:
        length: Password length (at least the number of character classes)

    Returns:
        Generated password

    Raises:
        ValueError: If length is too short to hold one character per class
    """
    if length < len(CHARACTER_CLASSES):
        raise ValueError(
            f"Password length must be at least {len(CHARACTER_CLASSES)}, got {length}"
        )

    chars = [secrets.choice(char_class) for char_class in CHARACTER_CLASSES]
    chars.extend(secrets.choice(ALL_CHARACTERS) for _ in range(length - len(chars)))
    _system_random.shuffle(chars)

    logger.debug(f"Generated {length}-character admin password")
    return "".join(chars)


def count_character_classes(password: str) -> int:
    """Count how many of the four character classes appear in a password."""
    return sum(
        1 for char_class in CHARACTER_CLASSES if any(c in char_class for c in password)
    )


def check_password_complexity(password: str) -> bool:
    """Check a password against Azure's admin password rules.

    Returns:
        True if the password has a valid length and at least 3 character classes
    """
    if not AZURE_MIN_PASSWORD_LENGTH <= len(password) <= AZURE_MAX_PASSWORD_LENGTH:
        return False
    return count_character_classes(password) >= AZURE_REQUIRED_CLASSES


__all__ = [
    "ALL_CHARACTERS",
    "CHARACTER_CLASSES",
    "DEFAULT_PASSWORD_LENGTH",
    "SPECIAL_CHARACTERS",
    "check_password_complexity",
    "count_character_classes",
    "generate_secure_password",
]

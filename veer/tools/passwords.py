"""
Password and passphrase generation with a heuristic strength score.
"""
import re
import secrets
from dataclasses import dataclass

from veer.exceptions import ValidationError

UPPERCASE = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
LOWERCASE = "abcdefghijklmnopqrstuvwxyz"
NUMBERS = "0123456789"
SYMBOLS = "!@#$%^&*()_+-=[]{}|;:,.<>?"
AMBIGUOUS = "{}[]()/\\'\"`~,;:.<>"
SIMILAR = "il1Lo0O"

MIN_LENGTH = 4
MAX_LENGTH = 64
MIN_WORDS = 3
MAX_WORDS = 8

WORDS = [
    "apple", "banana", "cherry", "dragon", "eagle", "falcon", "galaxy", "harbor",
    "island", "jungle", "kindle", "lemon", "mango", "nectar", "ocean", "phoenix",
    "quartz", "river", "sunset", "thunder", "umbrella", "velvet", "winter", "xenon",
    "yellow", "zenith", "anchor", "breeze", "castle", "diamond", "ember", "forest",
    "garden", "horizon", "ivory", "jasmine", "knight", "lantern", "marble", "nebula",
    "orchid", "prism", "quill", "rainbow", "silver", "tiger", "unity", "voyage",
    "whisper", "crystal", "dawn", "eclipse", "flame", "glacier", "haven", "iris",
]


@dataclass(frozen=True)
class PasswordOptions:
    length: int = 16
    uppercase: bool = True
    lowercase: bool = True
    numbers: bool = True
    symbols: bool = True
    exclude_ambiguous: bool = False
    exclude_similar: bool = False


PRESETS = {
    "simple": PasswordOptions(length=8, numbers=False, symbols=False),
    "standard": PasswordOptions(length=12, symbols=False),
    "strong": PasswordOptions(length=16),
    "maximum": PasswordOptions(length=24),
}


def character_pool(options: PasswordOptions) -> str:
    pool = ""
    if options.uppercase:
        pool += UPPERCASE
    if options.lowercase:
        pool += LOWERCASE
    if options.numbers:
        pool += NUMBERS
    if options.symbols:
        pool += SYMBOLS
    if options.exclude_ambiguous:
        pool = "".join(c for c in pool if c not in AMBIGUOUS)
    if options.exclude_similar:
        pool = "".join(c for c in pool if c not in SIMILAR)
    return pool


def generate_password(options: PasswordOptions = PasswordOptions()) -> str:
    """
    Generate a random password from the enabled character sets.

    Raises:
        ValidationError: Length outside 4-64, or no characters left to pick from
    """
    if not MIN_LENGTH <= options.length <= MAX_LENGTH:
        raise ValidationError(
            f"Length must be between {MIN_LENGTH} and {MAX_LENGTH}",
            field="length",
            value=options.length,
        )
    pool = character_pool(options)
    if not pool:
        raise ValidationError("Please select at least one character type")
    return "".join(secrets.choice(pool) for _ in range(options.length))


def generate_passphrase(word_count: int = 4, separator: str = "-") -> str:
    if not MIN_WORDS <= word_count <= MAX_WORDS:
        raise ValidationError(
            f"Word count must be between {MIN_WORDS} and {MAX_WORDS}",
            field="word_count",
            value=word_count,
        )
    return separator.join(secrets.choice(WORDS) for _ in range(word_count))


def password_strength(password: str) -> int:
    """Score 0-100 from length, character variety and a few penalties."""
    if not password:
        return 0
    score = 0
    length = len(password)
    if length >= 8:
        score += 20
    if length >= 12:
        score += 20
    if length >= 16:
        score += 20
    if length >= 20:
        score += 10

    if re.search(r"[a-z]", password):
        score += 10
    if re.search(r"[A-Z]", password):
        score += 10
    if re.search(r"[0-9]", password):
        score += 10
    if re.search(r"[^a-zA-Z0-9]", password):
        score += 15

    if re.search(r"(.)\1{2,}", password):
        score -= 10
    if re.fullmatch(r"[a-zA-Z]+", password):
        score -= 10
    if re.fullmatch(r"[0-9]+", password):
        score -= 20
    return max(0, min(100, score))


def strength_label(score: int) -> str:
    if score < 30:
        return "Weak"
    if score < 60:
        return "Fair"
    if score < 80:
        return "Good"
    return "Strong"

import unicodedata
from dataclasses import dataclass


MAX_LENGTH = 2000


@dataclass(frozen=True)
class Validation:
    is_valid: bool
    error: str | None = None


def _is_control(char: str) -> bool:
    return unicodedata.category(char) in ("Cc", "Cf")


def validate_text(text: object, max_length: int = MAX_LENGTH) -> Validation:
    """Check untrusted input before it costs any quota.

    Never raises. Length is measured in code points and is checked first.
    """
    if not isinstance(text, str):
        return Validation(False, "Input must be a string.")
    if len(text) > max_length:
        return Validation(
            False, f"Input is too long. Maximum length is {max_length} characters."
        )
    if not text.strip():
        return Validation(False, "Please enter some text to translate.")
    if "\x00" in text:
        return Validation(False, "Input contains invalid characters.")
    if all(_is_control(c) or c.isspace() for c in text):
        return Validation(False, "Input contains only control characters.")
    return Validation(True)

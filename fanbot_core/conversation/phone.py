"""
Spoken phone number conversion.
"""

from typing import Optional

from ..errors import FanbotError

COUNTRY_PREFIX = "+1"
PHONE_NUMBER_LENGTH = 12  # +1 and ten digits

DIGIT_WORDS = {
    "zero": "0",
    "one": "1",
    "two": "2",
    "three": "3",
    "four": "4",
    "five": "5",
    "six": "6",
    "seven": "7",
    "eight": "8",
    "nine": "9",
}


class InvalidPhoneNumber(FanbotError):
    """Dictated number does not have ten digits."""

    def __init__(self, number: str):
        super().__init__(
            f"Invalid phone number: {number!r}",
            code="INVALID_PHONE_NUMBER",
            details={"number": number},
        )
        self.number = number


def parse_phone_number(spoken: Optional[str]) -> str:
    """
    Convert space separated digit words to "+1" followed by the digits.

    Unrecognized words are skipped. The length is not checked here.
    """
    digits = [DIGIT_WORDS[word] for word in (spoken or "").split(" ") if word in DIGIT_WORDS]
    return COUNTRY_PREFIX + "".join(digits)


def is_valid_phone_number(number: str) -> bool:
    return len(number) == PHONE_NUMBER_LENGTH


def require_valid_phone_number(number: str) -> str:
    """Return number unchanged, or raise InvalidPhoneNumber."""
    if not is_valid_phone_number(number):
        raise InvalidPhoneNumber(number)
    return number

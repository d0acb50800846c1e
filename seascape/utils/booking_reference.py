"""Booking reference and QR token generation utilities."""

import random
import secrets
import string
from collections.abc import Callable

REFERENCE_PREFIX = "SEA"
QR_TOKEN_PREFIX = "SEASCAPE"


def generate_booking_reference(exists: Callable[[str], bool]) -> str:
    """Generate a unique booking reference in format SEA-XXXXXXXX.

    Args:
        exists: Uniqueness check against already issued references

    Returns:
        str: Unique reference like 'SEA-A3B7K9QZ'
    """
    chars = string.ascii_uppercase + string.digits
    while True:
        reference = f"{REFERENCE_PREFIX}-{''.join(random.choices(chars, k=8))}"
        if not exists(reference):
            return reference


def generate_qr_token(reference: str, exists: Callable[[str], bool]) -> str:
    """Generate an unguessable QR token bound to a booking reference.

    Returns:
        str: Token like 'SEASCAPE:SEA-A3B7K9QZ:9f1c2e7a4b6d8c0e'
    """
    while True:
        token = f"{QR_TOKEN_PREFIX}:{reference}:{secrets.token_hex(8)}"
        if not exists(token):
            return token

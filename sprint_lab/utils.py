"""Utility functions for input sanitizing and password hashing"""

import re
from datetime import datetime
from typing import Tuple

import bcrypt

BCRYPT_MAX_BYTES = 72

PHONE_MIN_DIGITS = 10
PHONE_MAX_DIGITS = 13
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 6

_MARKUP_CHARS = re.compile(r"[<>\"'`]")


def sanitize_input(value: str) -> str:
    """
    Strip surrounding whitespace and characters used for markup injection

    Examples:
        >>> sanitize_input("  <b>Ana</b> ")
        'bAna/b'
    """
    if not isinstance(value, str):
        return ""
    return _MARKUP_CHARS.sub("", value).strip()


def digits_only(value: str) -> str:
    return re.sub(r"\D", "", value or "")


def validate_phone_number(phone: str) -> bool:
    """Brazilian WhatsApp numbers: 10-13 digits (with or without country code)"""
    return PHONE_MIN_DIGITS <= len(digits_only(phone)) <= PHONE_MAX_DIGITS


def validate_name(name: str) -> Tuple[bool, str]:
    name = (name or "").strip()
    if len(name) < NAME_MIN_LENGTH:
        return False, "Nome muito curto"
    if len(name) > NAME_MAX_LENGTH:
        return False, "Nome muito longo"
    return True, ""


def validate_password(password: str) -> Tuple[bool, str]:
    if not password or len(password) < PASSWORD_MIN_LENGTH:
        return False, f"A senha deve ter pelo menos {PASSWORD_MIN_LENGTH} caracteres"
    return True, ""


def hash_password(password: str) -> str:
    """Hash a password with bcrypt (passwords are truncated to bcrypt's 72-byte limit)"""
    password_bytes = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, stored_hash: str) -> bool:
    if not password or not stored_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8")[:BCRYPT_MAX_BYTES], stored_hash.encode("utf-8"))
    except ValueError:
        # malformed or foreign hash
        return False


def today_br() -> str:
    """Today's date in pt-BR format (dd/mm/yyyy)"""
    return datetime.now().strftime("%d/%m/%Y")


def now_millis() -> int:
    return int(datetime.now().timestamp() * 1000)

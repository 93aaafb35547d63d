"""Vendor status and error code tables, keyed by locale."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional


# First locale is the default one
AVAILABLE_LOCALES = ("ru", "en")

# Field of the API error object that carries the description for each locale
ERROR_DESCRIPTION_FIELDS: Dict[str, str] = {
    "ru": "description_ru",
    "en": "description",
}

# Error codes meaning the API has blocked the sender account
BLOCKED_SENDER_CODES: Dict[int, Dict[str, str]] = {
    105: {
        "ru": "из-за низкого баланса",
        "en": "low balance",
    },
    106: {
        "ru": "за спам/ошибки",
        "en": "spam or too many errors",
    },
    107: {
        "ru": "за недостоверные учетные данные / недоступна эл. почта / проблемы с телефоном",
        "en": "unreliable account data, unreachable email or phone problems",
    },
    122: {
        "ru": "спорная ситуация",
        "en": "disputed situation",
    },
}


@dataclass(frozen=True)
class StatusInfo:
    """Delivery status as documented by the API.

    Attributes:
        code: Numeric status code, -2 to 3.
        name: Short localized status name.
        final: Whether the status will not change anymore.
    """

    code: int
    name: str
    final: bool


SMS_STATUSES: Dict[int, Dict[str, object]] = {
    -2: {"ru": "Ошибка", "en": "Error", "final": True},
    -1: {"ru": "Не доставлено", "en": "Not delivered", "final": True},
    0: {"ru": "Новое", "en": "New", "final": False},
    1: {"ru": "В очереди", "en": "Queued", "final": False},
    2: {"ru": "Доставлено", "en": "Delivered", "final": True},
    3: {"ru": "Отложено", "en": "Postponed", "final": False},
}


def status_info(code: Optional[int], locale: str = AVAILABLE_LOCALES[0]) -> Optional[StatusInfo]:
    """Return the documented meaning of a delivery status code.

    Unknown codes (the API may add new ones) yield ``None``.
    """

    entry = SMS_STATUSES.get(code) if code is not None else None
    if entry is None:
        return None
    return StatusInfo(code=code, name=str(entry[locale]), final=bool(entry["final"]))


def blocked_reason(code: Optional[int], locale: str = AVAILABLE_LOCALES[0]) -> Optional[str]:
    """Return why the sender was blocked, or ``None`` if ``code`` is not a block."""

    reasons = BLOCKED_SENDER_CODES.get(code) if code is not None else None
    if reasons is None:
        return None
    return reasons[locale]


def is_blocked_sender_code(code: Optional[int]) -> bool:
    return code in BLOCKED_SENDER_CODES

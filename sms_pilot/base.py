from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any, Mapping

from requests.structures import CaseInsensitiveDict

from .codes import (
    AVAILABLE_LOCALES,
    ERROR_DESCRIPTION_FIELDS,
    StatusInfo,
    blocked_reason as lookup_blocked_reason,
    is_blocked_sender_code,
    status_info,
)


class Outcome(str, Enum):
    """How a send attempt ended."""

    SENT = "sent"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(frozen=True)
class SendResult:
    """Result of a single SMS send attempt.

    Attributes:
        phone: Normalized destination phone (digits only).
        url: Request URL, including the API key.
        outcome: Whether the SMS was sent, rejected by the API or the call failed.
        error: Human-readable error, ``None`` when the SMS was sent.
        status_code: HTTP status, ``None`` if no response was received.
        headers: HTTP response headers, looked up case-insensitively.
        body: Raw HTTP response body.
        data: Parsed JSON body, empty if missing or unparsable.
        locale: Locale used to pick error descriptions and status names.
    """

    phone: str
    url: str
    outcome: Outcome
    error: Optional[str] = None
    status_code: Optional[int] = None
    headers: Mapping[str, str] = field(default_factory=CaseInsensitiveDict)
    body: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)
    locale: str = AVAILABLE_LOCALES[0]

    @property
    def sms_sent(self) -> bool:
        return self.data.get("send") is not None

    @property
    def rejected(self) -> bool:
        if self.sms_sent:
            return False
        return isinstance(self.data.get("error"), dict)

    @property
    def balance(self) -> Optional[float]:
        """Account balance remaining after this SMS, in RUB."""
        return _as_float(self.data.get("balance")) if self.sms_sent else None

    @property
    def sms_cost(self) -> Optional[float]:
        """Cost of this SMS, in RUB."""
        return _as_float(self.data.get("cost")) if self.sms_sent else None

    @property
    def broadcast_id(self) -> Optional[int]:
        """Server id the API assigned to this transmission."""
        return _as_int(self._first_send().get("server_id")) if self.sms_sent else None

    @property
    def sms_status(self) -> Optional[int]:
        """Delivery status code, see ``codes.SMS_STATUSES``."""
        return _as_int(self._first_send().get("status")) if self.sms_sent else None

    @property
    def sms_status_info(self) -> Optional[StatusInfo]:
        return status_info(self.sms_status, self.locale)

    @property
    def error_code(self) -> Optional[int]:
        return _as_int(self.data["error"].get("code")) if self.rejected else None

    @property
    def error_description(self) -> Optional[str]:
        if not self.rejected:
            return None
        error = self.data["error"]
        # Fall back to the other locales when the API omits the requested one
        fields = [ERROR_DESCRIPTION_FIELDS[self.locale]] + list(ERROR_DESCRIPTION_FIELDS.values())
        for name in fields:
            if error.get(name):
                return str(error[name])
        return ""

    @property
    def sender_blocked(self) -> bool:
        return is_blocked_sender_code(self.error_code)

    @property
    def blocked_reason(self) -> Optional[str]:
        return lookup_blocked_reason(self.error_code, self.locale)

    def _first_send(self) -> Dict[str, Any]:
        sends = self.data.get("send") or []
        if isinstance(sends, list) and sends and isinstance(sends[0], dict):
            return sends[0]
        return {}


def _as_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None

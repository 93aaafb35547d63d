from __future__ import annotations

from dataclasses import replace
import logging
import re
from typing import Optional, Dict, Any, List, Mapping, Tuple
from urllib.parse import quote_plus

import requests
from requests.structures import CaseInsensitiveDict

from .base import Outcome, SendResult
from .codes import AVAILABLE_LOCALES, StatusInfo
from .errors import (
    InvalidAPIKeyError,
    InvalidLocaleError,
    InvalidMessageError,
    InvalidPhoneError,
    InvalidSenderNameError,
)
from .utils.logger import get_logger, log_event, mask_secret


# Check the current endpoint at https://smspilot.ru/apikey.php#api1
API_ENDPOINT = "https://smspilot.ru/api.php"
REQUEST_ACCEPT_FORMAT = "json"
REQUEST_CHARSET = "utf-8"
DEFAULT_TIMEOUT = 10.0


def normalize_phone(phone: str) -> str:
    """Strip a free-form phone down to digits, turning a leading 8 into 7.

    Examples:
        "8 (902) 123-45-67" -> "79021234567"
        "+7-902-123-45-67"  -> "79021234567"
    """

    digits = re.sub(r"\D", "", phone)
    return re.sub(r"^8", "7", digits)


class SmsPilotClient:
    """Client for the SMS Pilot HTTP API.

    ``send`` returns a self-contained ``SendResult``. ``send_sms`` does the same
    work but keeps the result as ``last_result`` and answers with a bool, and the
    state accessors below read from that last result. The stored state makes an
    instance unsafe to share between threads through ``send_sms``.
    """

    def __init__(
        self,
        api_key: str,
        locale: str = AVAILABLE_LOCALES[0],
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
        endpoint: str = API_ENDPOINT,
    ) -> None:
        if not isinstance(api_key, str):
            raise InvalidAPIKeyError(
                f"API key must be a str, you passed a {type(api_key).__name__} ({api_key!r})"
            )
        if not api_key.strip():
            raise InvalidAPIKeyError("API key cannot be empty")
        if not isinstance(locale, str) or locale.lower() not in AVAILABLE_LOCALES:
            raise InvalidLocaleError(
                f"Locale must be one of {', '.join(AVAILABLE_LOCALES)}, you passed {locale!r}"
            )

        self.api_key = api_key
        self.locale = locale.lower()
        self.timeout = float(timeout)
        self.endpoint = endpoint
        # Only a session created here is closed by close()
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.logger = get_logger("sms_pilot.client")
        self.last_result: Optional[SendResult] = None

    def close(self) -> None:
        """Close the HTTP session if the client created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "SmsPilotClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # Main

    def send_sms(self, phone: str, message: str, sender_name: Optional[str] = None) -> bool:
        """Ask the API to transmit an SMS and remember the outcome.

        Args:
            phone: Destination phone in free form, sanitized before sending.
            message: Text of the SMS.
            sender_name: Optional sender name registered with the API.

        Returns:
            True if the SMS has been sent, False otherwise. Details are
            available through the state accessors, e.g. ``error``.

        Raises:
            InvalidPhoneError, InvalidMessageError, InvalidSenderNameError:
                on bad arguments, before any request is made.
        """

        self.last_result = self.send(phone, message, sender_name)
        return self.last_result.sms_sent

    def send(self, phone: str, message: str, sender_name: Optional[str] = None) -> SendResult:
        """Ask the API to transmit an SMS and return the result without storing it."""

        self._validate(phone, message, sender_name)

        normalized = normalize_phone(phone)
        url = self.build_url(normalized, message, sender_name)
        log_event(
            self.logger,
            level=logging.INFO,
            message="Sending SMS",
            extra={"phone": normalized, "url": self._masked(url)},
        )

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            return self._failed(normalized, url, str(exc))

        status_code = int(response.status_code)
        headers = CaseInsensitiveDict(response.headers or {})
        body = response.text

        if not 200 <= status_code < 300:
            return self._failed(
                normalized,
                url,
                f"HTTP request failed with code {status_code}",
                status_code=status_code,
                headers=headers,
                body=body,
            )

        try:
            data = response.json()
        except ValueError as exc:
            return self._failed(
                normalized,
                url,
                f"API returned invalid JSON. {exc}",
                status_code=status_code,
                headers=headers,
                body=body,
            )

        if not isinstance(data, dict):
            return self._failed(
                normalized,
                url,
                f"API returned invalid JSON. Expected an object, got {type(data).__name__}",
                status_code=status_code,
                headers=headers,
                body=body,
            )

        result = SendResult(
            phone=normalized,
            url=url,
            outcome=Outcome.FAILED,
            status_code=status_code,
            headers=headers,
            body=body,
            data=data,
            locale=self.locale,
        )

        if result.sms_sent:
            log_event(
                self.logger,
                level=logging.INFO,
                message="SMS sent",
                extra={
                    "phone": normalized,
                    "broadcast_id": result.broadcast_id,
                    "cost": result.sms_cost,
                    "balance": result.balance,
                },
            )
            return replace(result, outcome=Outcome.SENT)

        if result.rejected:
            error = f"{result.error_description} (error code: {result.error_code})".strip()
            log_event(
                self.logger,
                level=logging.WARNING,
                message="SMS rejected by API",
                extra={
                    "phone": normalized,
                    "error_code": result.error_code,
                    "sender_blocked": result.sender_blocked,
                },
            )
            return replace(result, outcome=Outcome.REJECTED, error=error)

        return self._failed(
            normalized,
            url,
            "API response contains neither a send result nor an error",
            status_code=status_code,
            headers=headers,
            body=body,
            data=data,
        )

    def build_url(self, phone: str, message: str, sender_name: Optional[str] = None) -> str:
        """Return the GET URL for sending ``message`` to an already normalized phone."""

        params: List[Tuple[str, str]] = [
            ("apikey", self.api_key),
            ("charset", REQUEST_CHARSET),
            ("format", REQUEST_ACCEPT_FORMAT),
            ("lang", self.locale),
            ("send", message),
        ]
        if sender_name is not None:
            params.append(("sender", sender_name))
        params.append(("to", phone))

        prepared = requests.Request("GET", self.endpoint, params=params).prepare()
        return str(prepared.url)

    # State accessors

    @property
    def error(self) -> Optional[str]:
        """Error message, combined with the API error code on rejection."""
        return self.last_result.error if self.last_result else None

    @property
    def error_code(self) -> Optional[int]:
        return self.last_result.error_code if self.last_result else None

    @property
    def error_description(self) -> Optional[str]:
        return self.last_result.error_description if self.last_result else None

    @property
    def url(self) -> Optional[str]:
        return self.last_result.url if self.last_result else None

    @property
    def phone(self) -> Optional[str]:
        return self.last_result.phone if self.last_result else None

    @property
    def response_status(self) -> Optional[int]:
        return self.last_result.status_code if self.last_result else None

    @property
    def response_headers(self) -> Mapping[str, str]:
        return self.last_result.headers if self.last_result else CaseInsensitiveDict()

    @property
    def response_body(self) -> Optional[str]:
        return self.last_result.body if self.last_result else None

    @property
    def response_data(self) -> Dict[str, Any]:
        return self.last_result.data if self.last_result else {}

    @property
    def balance(self) -> Optional[float]:
        return self.last_result.balance if self.last_result else None

    @property
    def sms_cost(self) -> Optional[float]:
        return self.last_result.sms_cost if self.last_result else None

    @property
    def broadcast_id(self) -> Optional[int]:
        return self.last_result.broadcast_id if self.last_result else None

    @property
    def sms_status(self) -> Optional[int]:
        return self.last_result.sms_status if self.last_result else None

    @property
    def sms_status_info(self) -> Optional[StatusInfo]:
        return self.last_result.sms_status_info if self.last_result else None

    @property
    def sms_sent(self) -> bool:
        return self.last_result.sms_sent if self.last_result else False

    @property
    def rejected(self) -> bool:
        return self.last_result.rejected if self.last_result else False

    @property
    def sender_blocked(self) -> bool:
        return self.last_result.sender_blocked if self.last_result else False

    # Internals

    def _validate(self, phone: Any, message: Any, sender_name: Any) -> None:
        if not isinstance(phone, str):
            raise InvalidPhoneError(
                f"`phone` must be a str, you passed a {type(phone).__name__} ({phone!r})"
            )
        if not isinstance(message, str):
            raise InvalidMessageError(
                f"`message` must be a str, you passed a {type(message).__name__} ({message!r})"
            )
        if sender_name is not None and not isinstance(sender_name, str):
            raise InvalidSenderNameError(
                f"`sender_name` must be a str, you passed a {type(sender_name).__name__} ({sender_name!r})"
            )
        if phone == "":
            raise InvalidPhoneError("`phone` cannot be empty")
        if message == "":
            raise InvalidMessageError("`message` cannot be empty")
        if sender_name == "":
            raise InvalidSenderNameError("`sender_name` cannot be empty")
        if not re.search(r"\d", phone):
            raise InvalidPhoneError("`phone` must contain digits")

    def _failed(
        self,
        phone: str,
        url: str,
        error: str,
        status_code: Optional[int] = None,
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> SendResult:
        log_event(
            self.logger,
            level=logging.ERROR,
            message="SMS request failed",
            extra={"phone": phone, "status_code": status_code, "error": self._masked(error)},
        )
        return SendResult(
            phone=phone,
            url=url,
            outcome=Outcome.FAILED,
            error=error,
            status_code=status_code,
            headers=headers if headers is not None else CaseInsensitiveDict(),
            body=body,
            data=data or {},
            locale=self.locale,
        )

    def _masked(self, text: Optional[str]) -> Optional[str]:
        # Transport errors can echo the request URL, where the key is form-encoded
        text = mask_secret(text, quote_plus(self.api_key))
        return mask_secret(text, self.api_key)

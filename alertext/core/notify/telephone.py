"""Voice-call notification channel.

Calls every configured operator through the provider's voice notify API and
plays a fixed template. The provider authenticates with an OAuth-style access
token that is fetched once when the notifier is built and refreshed after
``refresh_after_hours`` (47 by default), ahead of the provider's own expiry.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional, Sequence, Union

import requests

from alertext.core.alerts.models import Alert, NotificationEvent
from alertext.core.errors import (
    TelephoneAuthError,
    TelephoneDeliveryError,
    TelephoneError,
    TelephoneTransportError,
)
from alertext.core.notify.base import BaseNotifier
from alertext.core.notify.http import build_session, redact_url
from alertext.core.notify.models import NotifyResult, TelephoneConfig, TokenResult

logger = logging.getLogger(__name__)

LOGIN_PATH = "/rest/fastlogin/v1.0"
REFRESH_PATH = "/omp/oauth/refresh"
CALL_NOTIFY_PATH = "/rest/httpsessions/callnotify/v2.0"

FORM_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/x-www-form-urlencoded; charset=UTF-8",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_number(number: str, country_code: str = "+86") -> str:
    """Prefix a destination number with its country code.

    Numbers that already start with ``+`` are returned unchanged.
    """
    number = number.strip()
    if number.startswith("+"):
        return number
    return f"{country_code}{number}"


@dataclass(frozen=True)
class Credential:
    """Access token held by a notifier."""

    access_token: str = ""
    refresh_token: str = ""
    issued_at: Optional[datetime] = None
    expires_in_seconds: int = 0

    def age(self, now: datetime) -> timedelta:
        if self.issued_at is None:
            return timedelta.max
        return now - self.issued_at

    def is_stale(self, now: datetime, max_age: timedelta) -> bool:
        """True when no token is held or it is at least ``max_age`` old."""
        if not self.access_token:
            return True
        return self.age(now) >= max_age


class TelephoneNotifier(BaseNotifier):
    """Voice notification channel with token lifecycle management.

    Build one instance per configured channel and reuse it; the credential it
    holds is never shared between instances.
    """

    def __init__(
        self,
        config: TelephoneConfig,
        session: Optional[requests.Session] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """Initialize the notifier and fetch the first access token.

        Args:
            config: Channel configuration
            session: HTTP session (built from ``config.http`` if omitted)
            clock: Returns the current time; replaced in tests

        Raises:
            TelephoneAuthError: If the provider rejects the login
            TelephoneTransportError: If the provider cannot be reached
        """
        self.config = config
        self.session = session or build_session(config.http)
        self.clock = clock
        self.max_token_age = timedelta(hours=config.refresh_after_hours)
        self._credential = Credential()
        self._lock = threading.Lock()

        self.initial_access_token()

    @property
    def channel(self) -> str:
        return "telephone"

    @property
    def credential(self) -> Credential:
        return self._credential

    def __repr__(self) -> str:
        return (
            f"TelephoneNotifier(base_url={self.config.base_url!r}, "
            f"operators={len(self.config.operators)}, issued_at={self._credential.issued_at})"
        )

    # ------------------------------------------------------------------
    # Token lifecycle
    # ------------------------------------------------------------------

    def initial_access_token(self) -> None:
        """Log in with the static authorization and store the new token."""
        params = {"app_key": self.config.app_key, "username": self.config.username}
        headers = dict(FORM_HEADERS, Authorization=self.config.authorization)
        result = self._request_token(LOGIN_PATH, params, headers)
        self._store_token(result)
        logger.info(f"Telephone access token acquired (expires in {self._credential.expires_in_seconds}s)")

    def refresh_access_token(self) -> None:
        """Exchange the refresh token for a new access token."""
        with self._lock:
            self._refresh()

    def _refresh(self) -> None:
        params = {
            "app_key": self.config.app_key,
            "app_secret": self.config.app_secret,
            "grant_type": "refresh_token",
            "refresh_token": self._credential.refresh_token,
        }
        result = self._request_token(REFRESH_PATH, params, dict(FORM_HEADERS))
        self._store_token(result)
        logger.info(f"Telephone access token refreshed (expires in {self._credential.expires_in_seconds}s)")

    def _ensure_token(self) -> str:
        """Return a usable access token, refreshing it first when stale."""
        with self._lock:
            now = self.clock()
            if self._credential.is_stale(now, self.max_token_age):
                logger.info(f"Telephone access token is stale (age {self._credential.age(now)}), refreshing")
                self._refresh()
            else:
                logger.debug("Reusing cached telephone access token")
            return self._credential.access_token

    def _request_token(self, path: str, params: Dict[str, str], headers: Dict[str, str]) -> TokenResult:
        resp = self._post(path, params=params, headers=headers)
        try:
            body = resp.text
            if resp.status_code != 200:
                raise TelephoneAuthError(
                    f"the response status code is {resp.status_code}, and body is {body}",
                    status_code=resp.status_code,
                    body=body,
                )
            try:
                result = TokenResult.model_validate(resp.json())
            except ValueError as e:
                raise TelephoneAuthError(
                    f"invalid token response: {e}",
                    status_code=resp.status_code,
                    body=body,
                ) from None
            if not result.access_token:
                raise TelephoneAuthError(
                    f"no access token in response (resultcode={result.resultcode}, resultdesc={result.resultdesc})",
                    status_code=resp.status_code,
                    body=body,
                )
            return result
        finally:
            resp.close()

    def _store_token(self, result: TokenResult) -> None:
        try:
            expires_in = int(result.expires_in)
        except ValueError:
            logger.warning(f"Unparseable expires_in {result.expires_in!r} in token response, using 0")
            expires_in = 0

        self._credential = Credential(
            access_token=result.access_token,
            refresh_token=result.refresh_token,
            issued_at=self.clock(),
            expires_in_seconds=expires_in,
        )

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    def notify(
        self,
        event: Union[NotificationEvent, Sequence[Alert]],
        destinations: Optional[Sequence[str]] = None,
    ) -> NotifyResult:
        """Call every destination for a notification event.

        The alerts are not inspected: the same templated announcement is
        played for any event.

        Args:
            event: Notification event, or the alerts it wraps
            destinations: Numbers to call (defaults to configured operators)

        Returns:
            ``retryable=True`` with the error if the token could not be
            refreshed (nobody is called). Otherwise ``retryable=False`` and no
            error, even if some destinations failed; those are listed in
            ``failed``.
        """
        try:
            access_token = self._ensure_token()
        except TelephoneError as e:
            logger.error(f"Telephone token refresh failed, notification will be retried: {e}")
            return NotifyResult(retryable=True, error=e)

        result = NotifyResult()
        targets = self.config.operators if destinations is None else tuple(destinations)
        for operator in targets:
            try:
                self.send(operator, access_token)
            except TelephoneError as e:
                logger.error(f"Voice notify failed for operator {operator}: {e}")
                result.failed[operator] = str(e)
                continue
            result.succeeded.append(operator)

        if result.failed:
            logger.warning(f"Voice notify reached {len(result.succeeded)}/{result.attempted} operator(s)")
        return result

    def send(self, operator: str, access_token: Optional[str] = None) -> None:
        """Place one voice call.

        The response body is drained and discarded unless
        ``validate_delivery_response`` is set; only a transport error counts
        as a failed call.

        Raises:
            TelephoneDeliveryError: If the provider cannot be reached, or
                validation is on and the call was rejected
        """
        params = {
            "app_key": self.config.app_key,
            "access_token": access_token or self._credential.access_token,
        }
        payload = {
            "displayNbr": self.config.display_number,
            "calleeNbr": normalize_number(operator, self.config.country_code),
            "playInfoList": [
                {"templateId": self.config.template_id, "templateParas": ["1"], "collectInd": 0}
            ],
        }
        try:
            resp = self._post(
                CALL_NOTIFY_PATH,
                params=params,
                json=payload,
                headers={"Content-Type": "application/json"},
            )
        except TelephoneTransportError as e:
            raise TelephoneDeliveryError(operator, str(e)) from None
        try:
            if self.config.validate_delivery_response:
                self._check_delivery(operator, resp)
            else:
                _ = resp.content
        finally:
            resp.close()

        logger.debug(f"Voice notify sent to operator {operator}")

    def _check_delivery(self, operator: str, resp: requests.Response) -> None:
        if not 200 <= resp.status_code < 300:
            raise TelephoneDeliveryError(operator, f"status {resp.status_code}, body {resp.text}")
        try:
            data = resp.json()
        except ValueError:
            return
        if isinstance(data, dict) and data.get("resultcode") not in (None, "0", 0):
            raise TelephoneDeliveryError(
                operator,
                f"resultcode {data.get('resultcode')}: {data.get('resultdesc', '')}",
            )

    def _post(self, path: str, **kwargs) -> requests.Response:
        url = f"{self.config.base_url}{path}"
        try:
            return self.session.post(url, **kwargs)
        except requests.RequestException as e:
            raise TelephoneTransportError(f"POST {redact_url(url)} failed: {type(e).__name__}") from None


def build_telephone_notifier(settings=None, session: Optional[requests.Session] = None) -> TelephoneNotifier:
    """Build the telephone channel from application settings.

    Args:
        settings: Settings instance (defaults to the cached settings)
        session: Optional pre-built HTTP session

    Returns:
        A notifier holding a freshly acquired token
    """
    if settings is None:
        from alertext.config import get_settings

        settings = get_settings()

    config = settings.telephone_config()
    if not config.operators:
        logger.warning("Telephone notifier has no operators configured")
    return TelephoneNotifier(config, session=session)

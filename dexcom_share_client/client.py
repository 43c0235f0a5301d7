"""Main Dexcom Share API Client"""

import logging
import threading
from typing import Any, Dict, List, Optional

import requests

from .errors import (
    ShareAuthenticationError,
    ShareDecodeError,
    ShareError,
    ShareSessionError,
    ShareTransportError,
    ShareVendorError,
)
from .types import GlucoseReading, RawReading
from .utils import map_data

logger = logging.getLogger(__name__)


DEXCOM_BASE_URL = 'https://share2.dexcom.com/ShareWebServices/Services'  # US
DEXCOM_BASE_URLS = {
    'us': DEXCOM_BASE_URL,
    'ous': 'https://shareous1.dexcom.com/ShareWebServices/Services',
    'jp': 'https://share.dexcom.jp/ShareWebServices/Services',
}

DEXCOM_APPLICATION_ID = 'd89443d2-327c-4a6f-89e5-496bbb0317db'

URL_MAP = {
    'account_id': 'General/AuthenticatePublisherAccount',
    'session_id': 'General/LoginPublisherAccountById',
    'readings': 'Publisher/ReadPublisherLatestGlucoseValues',
}

# Returned instead of an error when the account name or password is wrong
DEFAULT_UUID = '00000000-0000-0000-0000-000000000000'

SESSION_ERROR_CODES = ('SessionIdNotFound', 'SessionNotValid')


class DexcomShareClient:
    """Client for accessing the Dexcom Share API"""

    def __init__(
        self,
        username: str,
        password: str,
        base_url: Optional[str] = None,
        application_id: str = DEXCOM_APPLICATION_ID,
        region: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize Dexcom Share client. No request is made until readings are asked for.

        Args:
            username: Dexcom account name (the publisher, not a follower)
            password: Dexcom password
            base_url: Share service root (default: picked from region, US if none)
            application_id: Application id sent on login calls
            region: One of 'us', 'ous', 'jp'; ignored when base_url is given
            session: Optional requests.Session to send requests with
            timeout: Optional timeout in seconds for every request
        """
        if base_url is None:
            region = (region or 'us').lower()
            if region not in DEXCOM_BASE_URLS:
                available_regions = ', '.join(DEXCOM_BASE_URLS)
                raise ValueError(f"Unknown region '{region}'. Available regions are {available_regions}.")
            base_url = DEXCOM_BASE_URLS[region]

        self.username = username
        self.password = password
        self.base_url = base_url.rstrip('/')
        self.application_id = application_id
        self.timeout = timeout

        self.account_id: Optional[str] = None
        self.session_id: Optional[str] = None
        self._login_lock = threading.Lock()

        self.session = session if session is not None else requests.Session()
        self.session.headers.update({
            'accept': 'application/json',
            'content-type': 'application/json',
        })

    def __enter__(self) -> 'DexcomShareClient':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def _request(self, endpoint: str, payload: Dict[str, Any]) -> Any:
        """POST a JSON payload to an endpoint and return the decoded JSON body"""
        url = f"{self.base_url}/{URL_MAP[endpoint]}"
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise ShareTransportError(f"Request to {URL_MAP[endpoint]} failed: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            if response.status_code != 200:
                raise ShareTransportError(
                    f"Request to {URL_MAP[endpoint]} failed with status code: {response.status_code}",
                    status_code=response.status_code,
                ) from e
            raise ShareDecodeError(f"Invalid JSON from {URL_MAP[endpoint]}: {e}") from e

        if isinstance(body, dict) and 'Code' in body:
            self._raise_vendor_error(endpoint, body)

        if response.status_code != 200:
            raise ShareTransportError(
                f"Request to {URL_MAP[endpoint]} failed with status code: {response.status_code}",
                status_code=response.status_code,
            )
        return body

    def _raise_vendor_error(self, endpoint: str, body: Dict[str, Any]) -> None:
        code = body.get('Code')
        vendor_message = body.get('Message')
        message = f"Share service rejected {URL_MAP[endpoint]}: {code}"
        if vendor_message:
            message = f"{message} ({vendor_message})"

        if endpoint in ('account_id', 'session_id'):
            raise ShareAuthenticationError(message, code=code, vendor_message=vendor_message)
        if code in SESSION_ERROR_CODES:
            raise ShareSessionError(message, code=code, vendor_message=vendor_message)
        raise ShareVendorError(message, code=code, vendor_message=vendor_message)

    def _request_token(self, endpoint: str, payload: Dict[str, Any]) -> str:
        token = self._request(endpoint, payload)
        if not isinstance(token, str):
            raise ShareDecodeError(f"Expected a string from {URL_MAP[endpoint]}, got: {type(token).__name__}")
        if token == DEFAULT_UUID:
            raise ShareAuthenticationError(
                'Bad credentials. Please check the account name and password of the Dexcom account '
                'sharing its data.',
                code='AccountPasswordInvalid',
            )
        return token

    def fetch_account_id(self) -> str:
        """Resolve the account id from account name and password"""
        logger.info(f"Resolving Dexcom account id for user: {self.username}")
        self.account_id = self._request_token('account_id', {
            'accountName': self.username,
            'password': self.password,
            'applicationId': self.application_id,
        })
        return self.account_id

    def fetch_session_id(self) -> str:
        """Authenticate with the account id and store the session id"""
        if self.account_id is None:
            raise ShareError('Account id must be resolved before authenticating')
        logger.info("Authenticating Dexcom Share session")
        self.session_id = self._request_token('session_id', {
            'accountId': self.account_id,
            'password': self.password,
            'applicationId': self.application_id,
        })
        return self.session_id

    def login(self) -> str:
        """
        Run the login handshake, skipping whatever is already resolved

        Returns:
            The session id

        Raises:
            ShareError: If any step fails; nothing further is attempted
        """
        with self._login_lock:
            if self.session_id is None:
                if self.account_id is None:
                    self.fetch_account_id()
                self.fetch_session_id()
            return self.session_id

    def _ensure_logged_in(self) -> str:
        """Ensure a session exists, login if not"""
        if self.session_id is None:
            return self.login()
        return self.session_id

    def reset_session(self) -> None:
        """Forget the session id so the next read authenticates again"""
        with self._login_lock:
            self.session_id = None

    def read_raw(self, minutes: int = 1440, max_count: int = 288) -> List[Dict[str, Any]]:
        """
        Read raw glucose records from the Share API

        Returns:
            List of records as returned by the service ({WT, Trend, Value, ...})
        """
        session_id = self._ensure_logged_in()
        records = self._request('readings', {
            'sessionId': session_id,
            'minutes': minutes,
            'maxCount': max_count,
        })
        if not isinstance(records, list):
            raise ShareDecodeError(f"Expected a list of readings, got: {type(records).__name__}")
        return records

    def get_readings(self, minutes: int = 1440, max_count: int = 288) -> List[GlucoseReading]:
        """
        Get glucose readings, most recent first

        Args:
            minutes: Lookback window in minutes (the service caps this at 1440)
            max_count: Maximum number of readings to return (the service caps this at 288)

        Returns:
            List of GlucoseReading in the order sent by the service
        """
        records = self.read_raw(minutes=minutes, max_count=max_count)
        readings = [map_data(RawReading.from_dict(item)) for item in records]
        logger.debug(f"Fetched {len(readings)} readings")
        return readings

    def get_latest_reading(self, minutes: int = 10) -> Optional[GlucoseReading]:
        """Get the most recent reading within the window, or None"""
        readings = self.get_readings(minutes=minutes, max_count=1)
        return readings[0] if readings else None

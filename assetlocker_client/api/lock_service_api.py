"""
AssetLocker Client - API Communication Module

Handles all communication with the lock service via its HTTP API.
Translates transport failures and server answers into the client's
exception types.

Author: AssetLocker Project
"""

import logging
import requests
from pydantic import ValidationError
from typing import Optional, Dict, Any

from ..exceptions import (
    LockServiceUnavailableError,
    LockServiceRejectedError,
    LockServiceProtocolError
)
from ..models import (
    Scope,
    LockStatus,
    LockedAssetsResponse,
    LockStatusResponse,
    LockActionResponse
)

# Configure logging
logger = logging.getLogger(__name__)

# Phrases understood from services that answer mutations with plain text
LEGACY_LOCK_SUCCESS_PHRASES = ("locked successfully", "already locked by you")
LEGACY_UNLOCK_FAILURE_MARKERS = ("error", "fail")


class LockServiceAPI:
    """
    API client for communicating with the lock service.

    Responsibilities:
    - Send lock/unlock requests as form posts
    - Query the lock table and single asset status
    - Enforce a bounded timeout on every request
    - Map failures onto LockService* exceptions, never onto a lock state
    """

    def __init__(self, service_url: str, verify_ssl: bool = True, timeout: float = 10,
                 session=None):
        """
        Initialize API client.

        Args:
            service_url: Base URL of the lock service (e.g., "http://locks.local:8000")
            verify_ssl: Whether to verify SSL certificates
            timeout: Seconds before a request is abandoned
            session: Optional pre-built session (requests.Session compatible)
        """
        self.base_url = service_url.rstrip("/")
        self.verify_ssl = verify_ssl
        self.timeout = timeout
        if session is None:
            # Use session for connection pooling to avoid TCP handshake overhead on each request
            session = requests.Session()
            session.verify = verify_ssl
        self.session = session
        logger.debug(f"Initialized API client for {self.base_url} (SSL verification: {self.verify_ssl})")

    def close(self):
        """
        Close the session and release resources.

        Should be called when done using the API client.
        """
        if getattr(self, 'session', None) is not None:
            self.session.close()
            self.session = None
            logger.debug("API client session closed")

    def _make_request(self, method: str, endpoint: str, **kwargs):
        """
        Make an API request.

        Args:
            method: HTTP method (GET, POST)
            endpoint: API endpoint (e.g., "/lock")
            **kwargs: Additional arguments for the request (params, data)

        Returns:
            Response object with a 2xx status

        Raises:
            LockServiceUnavailableError: If the service is unreachable, times out or fails
            LockServiceRejectedError: If the service refuses the request (HTTP 409)
            LockServiceProtocolError: If the service answers with another client error
        """
        if self.session is None:
            raise LockServiceUnavailableError("API client is closed")

        url = f"{self.base_url}{endpoint}"
        logger.debug(f"API request: {method} {endpoint}")

        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout:
            logger.error(f"Request to {endpoint} timed out after {self.timeout}s")
            raise LockServiceUnavailableError("timeout")
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Cannot connect to lock service at {self.base_url}: {e}")
            raise LockServiceUnavailableError(f"Cannot connect to lock service at {self.base_url}")
        except requests.exceptions.RequestException as e:
            logger.error(f"Request error: {str(e)}")
            raise LockServiceUnavailableError(f"Request error: {str(e)}")

        # Handle refusals (asset held by someone else)
        if response.status_code == 409:
            message = response.text
            holder = None
            try:
                refusal = LockActionResponse.model_validate(response.json())
                message = refusal.message or message
                holder = refusal.holder
            except (ValueError, ValidationError):
                pass
            logger.info(f"Request to {endpoint} rejected: {message}")
            raise LockServiceRejectedError(message, holder=holder)

        # Handle server errors
        if response.status_code >= 500:
            logger.error(f"Server error {response.status_code}: {response.text}")
            raise LockServiceUnavailableError(f"Server error {response.status_code}: {response.text}")

        # Handle other client errors (4xx)
        if response.status_code >= 400:
            error_message = response.text
            try:
                error_data = response.json()
                if isinstance(error_data, dict):
                    error_message = str(error_data.get("detail", error_message))
            except ValueError:
                pass
            logger.error(f"Request failed with status {response.status_code}: {error_message}")
            raise LockServiceProtocolError(f"Request failed with status {response.status_code}: {error_message}")

        return response

    @staticmethod
    def _decode_json(response) -> Any:
        try:
            return response.json()
        except ValueError:
            raise LockServiceProtocolError(f"Malformed response from lock service: {response.text[:200]!r}")

    @staticmethod
    def _build_form(scope: Scope, file_path: str, user_name: str) -> Dict[str, str]:
        return {
            "branch": scope.branch,
            "origin": scope.origin,
            "filePath": file_path,
            "userName": user_name
        }

    @staticmethod
    def _build_params(scope: Scope, file_path: Optional[str] = None) -> Dict[str, str]:
        params = {"branch": scope.branch, "origin": scope.origin}
        if file_path is not None:
            params["filePath"] = file_path
        return params

    def _parse_action_response(self, response) -> Optional[LockActionResponse]:
        """Decode a structured lock/unlock answer, or None if the body is plain text."""
        try:
            return LockActionResponse.model_validate(response.json())
        except (ValueError, ValidationError):
            return None

    # ==================== Lock Endpoints ====================

    def lock_asset(self, scope: Scope, file_path: str, user_name: str) -> LockActionResponse:
        """
        Request the lock on an asset.

        Args:
            scope: Origin/branch namespace of the request
            file_path: Normalized asset path
            user_name: Requesting user

        Returns:
            Service answer (locked, or already locked by the same user)

        Raises:
            LockServiceRejectedError: If the asset is held by another user
            LockServiceUnavailableError: If the lock state cannot be determined
            LockServiceProtocolError: If the answer cannot be understood
        """
        response = self._make_request("POST", "/lock", data=self._build_form(scope, file_path, user_name))

        action = self._parse_action_response(response)
        if action is not None:
            if not action.success:
                raise LockServiceRejectedError(action.message or "Lock rejected", holder=action.holder)
            return action

        text = response.text
        if any(phrase in text for phrase in LEGACY_LOCK_SUCCESS_PHRASES):
            return LockActionResponse(success=True, status="locked", message=text, holder=user_name)
        raise LockServiceRejectedError(text or "Lock rejected")

    def unlock_asset(self, scope: Scope, file_path: str, user_name: str) -> LockActionResponse:
        """
        Release the lock on an asset.

        Args:
            scope: Origin/branch namespace of the request
            file_path: Normalized asset path
            user_name: Requesting user

        Returns:
            Service answer (unlocked, or was not locked)

        Raises:
            LockServiceRejectedError: If the asset is held by another user
            LockServiceUnavailableError: If the lock state cannot be determined
            LockServiceProtocolError: If the answer cannot be understood
        """
        response = self._make_request("POST", "/unlock", data=self._build_form(scope, file_path, user_name))

        action = self._parse_action_response(response)
        if action is not None:
            if not action.success:
                raise LockServiceRejectedError(action.message or "Unlock rejected", holder=action.holder)
            return action

        text = response.text
        if any(marker in text.lower() for marker in LEGACY_UNLOCK_FAILURE_MARKERS):
            raise LockServiceRejectedError(text)
        return LockActionResponse(success=True, status="unlocked", message=text)

    def get_locked_assets(self, scope: Scope) -> Dict[str, str]:
        """
        Get every lock in a scope.

        Args:
            scope: Origin/branch namespace

        Returns:
            Mapping of asset path to holder

        Raises:
            LockServiceUnavailableError: If the service is unreachable or returned no usable data
            LockServiceProtocolError: If the body cannot be decoded
        """
        response = self._make_request("GET", "/lockedAssets", params=self._build_params(scope))
        data = self._decode_json(response)

        if data is None:
            raise LockServiceUnavailableError("Lock service returned no usable data")
        try:
            locked_assets = LockedAssetsResponse.model_validate(data)
        except ValidationError as e:
            raise LockServiceProtocolError(f"Unexpected lock table format: {e}")

        if locked_assets.Locks is None:
            raise LockServiceUnavailableError("Lock service returned no usable data")
        return dict(locked_assets.Locks)

    def get_lock_status(self, scope: Scope, file_path: str) -> LockStatus:
        """
        Get the lock status of a single asset.

        Args:
            scope: Origin/branch namespace
            file_path: Normalized asset path

        Returns:
            LockStatus for the asset

        Raises:
            LockServiceUnavailableError: If the service is unreachable
            LockServiceProtocolError: If the body cannot be decoded
        """
        response = self._make_request("GET", "/status", params=self._build_params(scope, file_path))
        data = self._decode_json(response)

        try:
            status = LockStatusResponse.model_validate(data)
        except ValidationError as e:
            raise LockServiceProtocolError(f"Unexpected status format: {e}")

        if status.Locked and not status.User:
            raise LockServiceProtocolError(f"Status for {file_path} is locked without a holder")
        return LockStatus(locked=status.Locked, holder=status.User if status.Locked else None)

    def check_health(self) -> Dict[str, Any]:
        """
        Check that the lock service is running.

        Returns:
            Health information reported by the service
        """
        response = self._make_request("GET", "/health")
        return self._decode_json(response)

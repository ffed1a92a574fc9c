"""
API Client for the Admin Backend

HTTP client used by the dashboard to call the FastAPI backend: user CRUD,
the protobuf export and registration statistics.
"""
import os
import logging
import httpx
from typing import Optional, List, Dict, Any
from urllib.parse import urljoin

logger = logging.getLogger(__name__)

# Configuration from environment
API_BASE_URL = os.getenv("ADMIN_API_URL", "http://localhost:4000")


def _get_default_timeout() -> float:
    return float(os.getenv("ADMIN_API_TIMEOUT", "30"))


class AdminAPIError(Exception):
    """Non-2xx response or transport failure talking to the backend."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class AdminAPIClient:
    """
    HTTP client for the admin backend API.

    Responses use the backend envelope ({"success": ..., "data": ...});
    the helpers below return the unwrapped payload.
    """

    def __init__(
        self,
        base_url: str = None,
        timeout: float = None,
        transport: httpx.BaseTransport = None
    ):
        """
        Initialize API client.

        Args:
            base_url: Backend API URL (default: from ADMIN_API_URL env var)
            timeout: Request timeout in seconds (default: ADMIN_API_TIMEOUT or 30)
            transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        self.base_url = (base_url or os.getenv("ADMIN_API_URL") or API_BASE_URL).rstrip('/')
        self.timeout = timeout if timeout is not None else _get_default_timeout()
        self._transport = transport
        self.headers = {"Accept": "application/json"}

        logger.info(f"AdminAPIClient initialized: {self.base_url}")

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout, transport=self._transport)

    def _send(
        self,
        method: str,
        endpoint: str,
        params: Dict[str, Any] = None,
        json_data: Dict[str, Any] = None
    ) -> httpx.Response:
        url = urljoin(self.base_url + "/", endpoint.lstrip('/'))
        if params:
            params = {key: value for key, value in params.items() if value is not None}

        with self._client() as client:
            try:
                response = client.request(
                    method=method,
                    url=url,
                    headers=self.headers,
                    params=params,
                    json=json_data,
                )
                response.raise_for_status()
                return response

            except httpx.HTTPStatusError as e:
                error = self._error_message(e.response)
                if e.response.status_code == 404:
                    logger.debug(f"API 404: {endpoint} - {error}")
                else:
                    logger.error(f"API error {e.response.status_code}: {error}")
                raise AdminAPIError(error, status_code=e.response.status_code, details=self._safe_json(e.response)) from e
            except httpx.RequestError as e:
                logger.error(f"Request error: {e}")
                raise AdminAPIError(f"Request failed: {e}") from e

    @staticmethod
    def _safe_json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    def _error_message(self, response: httpx.Response) -> str:
        body = self._safe_json(response)
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return f"API error: {response.status_code}"

    def _request(self, method: str, endpoint: str, params: Dict[str, Any] = None, json_data: Dict[str, Any] = None) -> Dict[str, Any]:
        """Make a JSON request and return the decoded body."""
        return self._send(method, endpoint, params=params, json_data=json_data).json()

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def list_users(
        self,
        page: int = 1,
        limit: int = 20,
        role: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None
    ) -> Dict[str, Any]:
        """List users; returns {"data": [...], "pagination": {...}}."""
        body = self._request("GET", "/api/users", params={
            "page": page,
            "limit": limit,
            "role": role,
            "status": status,
            "search": search,
        })
        return {"data": body.get("data", []), "pagination": body.get("pagination", {})}

    def get_user(self, user_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/users/{user_id}")["data"]

    def create_user(self, email: str, role: str = "user", status: str = "active") -> Dict[str, Any]:
        body = self._request("POST", "/api/users", json_data={"email": email, "role": role, "status": status})
        logger.info(f"Created user {body['data']['id']} ({email})")
        return body["data"]

    def update_user(self, user_id: str, role: Optional[str] = None, status: Optional[str] = None) -> Dict[str, Any]:
        updates = {key: value for key, value in (("role", role), ("status", status)) if value is not None}
        return self._request("PUT", f"/api/users/{user_id}", json_data=updates)["data"]

    def delete_user(self, user_id: str) -> str:
        return self._request("DELETE", f"/api/users/{user_id}")["message"]

    def verify_user(self, user_id: str) -> bool:
        """Ask the server to re-check a stored signature."""
        return bool(self._request("GET", f"/api/users/{user_id}/verify")["data"]["verified"])

    # ------------------------------------------------------------------
    # Export / statistics
    # ------------------------------------------------------------------

    def export_users(self) -> bytes:
        """Download the protobuf UserList export as raw bytes."""
        response = self._send("GET", "/api/users/export")
        logger.debug(f"Downloaded export: {len(response.content)} bytes")
        return response.content

    def users_per_day(self, days: int = 7) -> List[Dict[str, Any]]:
        """Registration counts per day, oldest first."""
        return self._request("GET", "/api/stats/users-per-day", params={"days": days})["data"]

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/api/health")

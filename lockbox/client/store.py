# lockbox/client/store.py
"""
Authoritative Secret Store adapters.

SecretStore is the contract the sync engine depends on. HttpSecretStore
implements it against the lockbox service's REST API (/api/v1).

Every call either returns the authoritative answer or raises:
    AuthError       - wrong master password, missing or rejected token
    TransportError  - any other rejection (HTTP error, timeout, network)
"""
import logging
from typing import Any, Dict, List, Optional, Protocol

import httpx

from lockbox.app.core.config import settings
from lockbox.client.errors import AuthError, TransportError
from lockbox.client.models import Lockbox

logger = logging.getLogger(__name__)


class SecretStore(Protocol):
    async def list_all(self) -> List[Lockbox]: ...

    async def get_decrypted(self, lockbox_id: int) -> Optional[Lockbox]: ...

    async def create(
        self,
        name: str,
        content: str,
        category: Optional[str],
        unlock_delay_seconds: int,
        relock_delay_seconds: int,
    ) -> Lockbox: ...

    async def update(self, lockbox_id: int, fields: Dict[str, Any]) -> Lockbox: ...

    async def delete(self, lockbox_id: int) -> None: ...

    async def unlock(self, lockbox_id: int) -> Lockbox: ...

    async def relock(self, lockbox_id: int) -> Lockbox: ...

    async def reconcile_all(self) -> List[Lockbox]: ...

    async def is_master_password_set(self) -> bool: ...

    async def set_master_password(self, password: str) -> None: ...

    async def verify_master_password(self, password: str) -> bool: ...

    async def export_all(self) -> str: ...

    async def import_all(self, blob: str) -> List[str]: ...


def _error_detail(response: httpx.Response) -> str:
    try:
        detail = response.json().get("detail")
    except (ValueError, AttributeError):
        detail = None
    if isinstance(detail, str) and detail:
        return detail
    if detail:
        # FastAPI validation errors come back as a list of dicts
        return str(detail)
    return f"HTTP {response.status_code}"


class HttpSecretStore:
    """
    SecretStore backed by the lockbox REST API.

    The bearer token obtained from set_master_password or
    verify_master_password is kept in memory until forget_credentials().

    Example:
        >>> async with HttpSecretStore("http://127.0.0.1:8000/api/v1") as store:
        ...     if await store.verify_master_password("correct horse"):
        ...         lockboxes = await store.list_all()
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._token: Optional[str] = None
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            timeout=httpx.Timeout(timeout or settings.REQUEST_TIMEOUT_SECONDS),
            transport=transport,
        )

    async def __aenter__(self) -> "HttpSecretStore":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        self.forget_credentials()
        await self._client.aclose()

    @property
    def has_credentials(self) -> bool:
        return self._token is not None

    def forget_credentials(self) -> None:
        self._token = None

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        headers = {}
        if self._token is not None:
            headers["Authorization"] = f"Bearer {self._token}"

        try:
            response = await self._client.request(method, url, headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            raise TransportError(f"{method} {url} timed out: {e}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        if response.status_code in (401, 403):
            raise AuthError(_error_detail(response))
        if response.is_error:
            raise TransportError(_error_detail(response), status_code=response.status_code)
        return response

    @staticmethod
    def _lockbox(data: Any) -> Lockbox:
        return Lockbox.model_validate(data)

    async def list_all(self) -> List[Lockbox]:
        response = await self._request("GET", "/lockboxes/")
        return [self._lockbox(item) for item in response.json()]

    async def get_decrypted(self, lockbox_id: int) -> Optional[Lockbox]:
        response = await self._request("GET", f"/lockboxes/{lockbox_id}")
        data = response.json()
        return self._lockbox(data) if data is not None else None

    async def create(
        self,
        name: str,
        content: str,
        category: Optional[str],
        unlock_delay_seconds: int,
        relock_delay_seconds: int,
    ) -> Lockbox:
        response = await self._request("POST", "/lockboxes/", json={
            "name": name,
            "content": content,
            "category": category,
            "unlock_delay_seconds": unlock_delay_seconds,
            "relock_delay_seconds": relock_delay_seconds,
        })
        return self._lockbox(response.json())

    async def update(self, lockbox_id: int, fields: Dict[str, Any]) -> Lockbox:
        response = await self._request("PATCH", f"/lockboxes/{lockbox_id}", json=fields)
        return self._lockbox(response.json())

    async def delete(self, lockbox_id: int) -> None:
        await self._request("DELETE", f"/lockboxes/{lockbox_id}")

    async def unlock(self, lockbox_id: int) -> Lockbox:
        response = await self._request("POST", f"/lockboxes/{lockbox_id}/unlock")
        return self._lockbox(response.json())

    async def relock(self, lockbox_id: int) -> Lockbox:
        response = await self._request("POST", f"/lockboxes/{lockbox_id}/relock")
        return self._lockbox(response.json())

    async def reconcile_all(self) -> List[Lockbox]:
        response = await self._request("POST", "/lockboxes/reconcile")
        return [self._lockbox(item) for item in response.json()]

    async def is_master_password_set(self) -> bool:
        response = await self._request("GET", "/auth/status")
        return bool(response.json()["is_set"])

    async def set_master_password(self, password: str) -> None:
        response = await self._request("POST", "/auth/setup", json={"password": password})
        self._token = response.json()["access_token"]
        logger.info("Master password set, session token acquired")

    async def verify_master_password(self, password: str) -> bool:
        try:
            response = await self._request("POST", "/auth/login", json={"password": password})
        except AuthError:
            self._token = None
            return False
        self._token = response.json()["access_token"]
        return True

    async def export_all(self) -> str:
        response = await self._request("GET", "/transfer/export")
        return response.json()["data"]

    async def import_all(self, blob: str) -> List[str]:
        response = await self._request("POST", "/transfer/import", json={"data": blob})
        return list(response.json()["imported"])

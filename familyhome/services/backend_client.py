"""HTTP client for the remote backend (auth, document store, blob store).

The backend is an opaque managed service. Documents travel as
``{"id": ..., "fields": {...}}`` where ``fields`` is a string-keyed map;
server-assigned values such as ``createdAt`` come back in ``fields``.
"""

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from familyhome.exceptions import RemoteOperationError
from familyhome.schemas.documents import AuthSession

logger = logging.getLogger(__name__)


class BackendClient:
    """Thin async wrapper over the backend's REST endpoints.

    Every failure, transport or HTTP, is raised as RemoteOperationError.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self.session: Optional[AuthSession] = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _headers(self) -> dict:
        if self.session and self.session.id_token:
            return {"Authorization": f"Bearer {self.session.id_token}"}
        return {}

    async def _request(self, method: str, path: str, extra_headers: Optional[dict] = None, **kwargs) -> Any:
        headers = {**self._headers(), **(extra_headers or {})}
        try:
            response = await self.client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("Backend %s %s failed: %s", method, path, e)
            raise RemoteOperationError(f"Backend unreachable: {e}") from e

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = None
            detail = (body.get("error") if isinstance(body, dict) else None) or response.text
            logger.warning("Backend %s %s returned %d: %s", method, path, response.status_code, detail)
            raise RemoteOperationError(detail or "Backend request failed", status_code=response.status_code)

        if not response.content:
            return None
        return response.json()

    # --- Auth ---

    def _start_session(self, data: Any) -> AuthSession:
        try:
            self.session = AuthSession.model_validate(data)
        except ValidationError as e:
            logger.warning("Malformed auth response: %s", e)
            raise RemoteOperationError("Malformed auth response from backend") from e
        return self.session

    async def sign_up(self, email: str, password: str, display_name: str) -> AuthSession:
        data = await self._request(
            "POST", "/auth/signup",
            json={"email": email, "password": password, "displayName": display_name},
        )
        return self._start_session(data)

    async def sign_in(self, email: str, password: str) -> AuthSession:
        data = await self._request("POST", "/auth/signin", json={"email": email, "password": password})
        return self._start_session(data)

    async def sign_out(self) -> None:
        try:
            await self._request("POST", "/auth/signout")
        finally:
            self.session = None

    # --- Documents ---

    async def create_document(self, collection: str, fields: dict, doc_id: Optional[str] = None) -> dict:
        """Create a document; the backend assigns an id unless doc_id is given."""
        body: dict = {"fields": fields}
        if doc_id:
            body["id"] = doc_id
        return await self._request("POST", f"/collections/{collection}/documents", json=body)

    async def get_document(self, collection: str, doc_id: str) -> dict:
        return await self._request("GET", f"/collections/{collection}/documents/{doc_id}")

    async def query_documents(self, collection: str, field: str, value: str) -> list[dict]:
        data = await self._request(
            "GET", f"/collections/{collection}/documents",
            params={"field": field, "value": value},
        )
        if data is None:
            return []
        documents = data.get("documents") if isinstance(data, dict) else None
        if not isinstance(documents, list):
            raise RemoteOperationError("Malformed query response from backend")
        return documents

    async def update_document(self, collection: str, doc_id: str, fields: dict) -> dict:
        return await self._request(
            "PATCH", f"/collections/{collection}/documents/{doc_id}",
            json={"fields": fields},
        )

    # --- Blobs ---

    async def upload_blob(self, path: str, data: bytes, content_type: str = "image/jpeg") -> str:
        """Upload bytes to path and return the public download URL."""
        result = await self._request(
            "PUT", f"/storage/{path}",
            content=data,
            extra_headers={"Content-Type": content_type},
        )
        if not isinstance(result, dict) or not result.get("url"):
            raise RemoteOperationError("Upload returned no URL")
        return result["url"]

"""HTTP invoker shared by every operation."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import httpx

from foundry_agents.core.constants import ContentTypes, Limits
from foundry_agents.core.exceptions import ApiError
from foundry_agents.core.logging import get_logger
from foundry_agents.services.auth import TokenProvider, audience_for
from foundry_agents.services.endpoint import resolve

if TYPE_CHECKING:
    from foundry_agents.services.context_store import ContextStore

logger = get_logger("services.api_client")


def extract_error_message(response: httpx.Response) -> str:
    """Upstream error message from a failed response, verbatim."""
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        if payload.get("message"):
            return str(payload["message"])

    text = response.text.strip()
    return text or f"HTTP {response.status_code} {response.reason_phrase}".strip()


class ApiClient:
    """
    Issues single requests against the active context.

    No retries: a failed call raises ``ApiError`` and the caller decides.
    """

    def __init__(
        self,
        store: ContextStore,
        token_provider: TokenProvider,
        http_client: httpx.Client | None = None,
        timeout: float = Limits.REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        """
        Initialize the client.

        Args:
            store: Context store supplying the active context
            token_provider: Bearer token source
            http_client: Optional preconfigured httpx client
            timeout: Default per-request timeout in seconds
        """
        self.store = store
        self.token_provider = token_provider
        self.timeout = timeout
        self._owns_http = http_client is None
        self._http = http_client or httpx.Client()

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> ApiClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def call(
        self,
        service: str,
        operation: str,
        path: str | None = None,
        method: str = "GET",
        body: Any = None,
        content_type: str | None = ContentTypes.JSON,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
        use_open_prefix: bool = False,
        form: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        raw: bool = False,
    ) -> Any:
        """
        Send one request and parse the response.

        Args:
            service: Service collection, e.g. ``assistants``
            operation: Logical operation (selects the API version)
            path: Optional path below the service
            method: HTTP method
            body: Request body; JSON-encoded when content_type is JSON
            content_type: Content type of ``body``
            headers: Extra headers; they override the defaults
            timeout: Per-request timeout in seconds
            use_open_prefix: Use the ``openai/`` prefix on the legacy assistant surface
            form: Multipart form fields
            files: Multipart file parts
            params: Extra query parameters
            raw: Return the response bytes instead of parsed JSON

        Returns:
            Parsed JSON (``{}`` for empty bodies), text, or bytes when ``raw``

        Raises:
            ConfigurationError: If no context is set
            AuthenticationError: If no token could be acquired
            ApiError: On transport failure or a non-2xx response
        """
        context = self.store.get()
        uri = resolve(context, service, operation, path, use_open_prefix)
        token = self.token_provider.get_token(audience_for(context))

        request_headers = httpx.Headers({"Authorization": f"Bearer {token}"})
        request_headers.update(headers or {})

        request_kwargs: dict[str, Any] = {}
        if form is not None or files is not None:
            request_kwargs["data"] = form or {}
            request_kwargs["files"] = files or {}
        elif body is not None:
            if content_type == ContentTypes.JSON:
                request_kwargs["content"] = json.dumps(body).encode("utf-8")
            else:
                request_kwargs["content"] = body
            if content_type and "content-type" not in request_headers:
                request_headers["Content-Type"] = content_type

        effective_timeout = timeout or self.timeout
        logger.debug(f"{method} {uri}")

        try:
            response = self._http.request(
                method,
                uri,
                headers=request_headers,
                params=params,
                timeout=effective_timeout,
                **request_kwargs,
            )
        except httpx.TimeoutException as e:
            raise ApiError(
                f"Request timed out after {effective_timeout}s",
                details={"method": method, "uri": uri},
            ) from e
        except httpx.HTTPError as e:
            raise ApiError(
                str(e) or e.__class__.__name__,
                details={"method": method, "uri": uri},
            ) from e

        if not response.is_success:
            message = extract_error_message(response)
            logger.debug(f"{method} {uri} returned {response.status_code}: {message}")
            raise ApiError(
                message,
                status_code=response.status_code,
                details={"method": method, "uri": uri},
            )

        if raw:
            return response.content
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return response.text

    def list_all(
        self,
        service: str,
        operation: str,
        path: str | None = None,
        params: dict[str, Any] | None = None,
        use_open_prefix: bool = False,
        page_size: int = Limits.LIST_PAGE_SIZE,
    ) -> list[dict[str, Any]]:
        """
        Fetch every page of a cursor-paginated collection.

        Returns:
            All items as one flat list
        """
        query = dict(params or {})
        query.setdefault("limit", page_size)
        items: list[dict[str, Any]] = []

        while True:
            page = self.call(
                service,
                operation,
                path=path,
                params=query,
                use_open_prefix=use_open_prefix,
            )
            if isinstance(page, list):
                items.extend(page)
                break
            data = page.get("data") or []
            items.extend(data)
            if not page.get("has_more") or not data:
                break
            query["after"] = page.get("last_id") or data[-1].get("id")

        logger.debug(f"Listed {len(items)} item(s) from {service}")
        return items

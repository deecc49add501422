"""
CouchDB page fetcher for the snippet migration.

Reads the `_all_docs` view one page at a time in ascending `_id` order:
- The first page skips the leading design document (`skip=1`)
- Later pages start at the cursor and skip the cursor document itself
- One independent request per page, no retry: any failure is fatal
"""

import httpx
import json
from typing import Optional, Dict, Any
from pydantic import ValidationError
from schemas.couchdb import AllDocsResponse
from core.exceptions import (
    APIExtractionError,
    AuthenticationError,
    ResourceNotFoundError,
    NetworkError,
    ResponseDecodeError
)
import logging

logger = logging.getLogger(__name__)


class CouchDBExtractor:
    """
    Fetch pages of snippet documents from CouchDB.

    Attributes:
        base_url: CouchDB server URL (credentials may be embedded)
        database: Database holding the snippets (default: "snippets")
        timeout: Request timeout in seconds, None waits forever
        transport: Optional httpx transport (used by tests)
    """

    def __init__(
        self,
        base_url: str,
        database: str = "snippets",
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.database = database
        self.timeout = timeout
        self.transport = transport

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.database}/_all_docs"

    @staticmethod
    def build_params(start_key: Optional[str], limit: int) -> Dict[str, Any]:
        """Query parameters for one page of _all_docs"""
        params: Dict[str, Any] = {
            "descending": "false",
            "limit": str(limit),
        }

        if start_key is not None:
            # startkey is JSON, startkey_docid is the raw id
            params["startkey"] = json.dumps(start_key)
            params["startkey_docid"] = start_key

        # Skips the design document on the first page, the cursor afterwards
        params["skip"] = "1"
        params["include_docs"] = "true"
        return params

    async def fetch_page(self, start_key: Optional[str] = None, limit: int = 1000) -> AllDocsResponse:
        """
        Fetch the page following start_key.

        Args:
            start_key: _id of the last committed document, None for the first page
            limit: Maximum number of documents in the page

        Returns:
            Decoded page; an empty `rows` list means the listing is exhausted

        Raises:
            NetworkError: If CouchDB cannot be reached
            APIExtractionError: For non-success HTTP statuses
            ResponseDecodeError: If the body is not a valid _all_docs page
        """
        params = self.build_params(start_key, limit)
        context = {"api_url": self.url, "start_key": start_key, "limit": limit}

        logger.debug(f"Fetching page after {start_key!r} from {self.url}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(self.url, params=params)
        except httpx.HTTPError as e:
            raise NetworkError(
                "Failed to reach document store",
                context=context,
                original_exception=e
            )

        self._check_status(response, context)

        try:
            data = response.json()
        except ValueError as e:
            raise ResponseDecodeError(
                "Failed to parse JSON response",
                context={**context, "response_body": response.text[:500]},
                original_exception=e
            )

        try:
            page = AllDocsResponse.model_validate(data)
        except ValidationError as e:
            raise ResponseDecodeError(
                "Response does not match the _all_docs format",
                context={**context, "error_count": e.error_count()},
                original_exception=e
            )

        logger.debug(f"Fetched {len(page.rows)} documents (total_rows={page.total_rows})")
        return page

    @staticmethod
    def _check_status(response: httpx.Response, context: Dict[str, Any]):
        if response.is_success:
            return

        error_context = {
            **context,
            "status_code": response.status_code,
            "response_body": response.text[:500]  # Truncate
        }

        if response.status_code in (401, 403):
            raise AuthenticationError("Authentication failed for document store", context=error_context)

        if response.status_code == 404:
            raise ResourceNotFoundError(f"Resource not found: {context['api_url']}", context=error_context)

        raise APIExtractionError(
            f"Document store returned HTTP {response.status_code}",
            context=error_context
        )

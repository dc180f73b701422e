"""HTTP client for the Trassenfinder infrastructure API.

Each collection is served as a JSON array below the configured base URL:
``{api_url}/betriebsstellen`` for stations and ``{api_url}/streckensegmente``
for segments.
"""

import json
import logging
from typing import TYPE_CHECKING, Any, TypeVar

import aiohttp
from pydantic import BaseModel, ValidationError

from infra_explorer.adapters.api_request_logger import log_api_request
from infra_explorer.adapters.trassenfinder_api.constants import (
    DEFAULT_TIMEOUT_SECONDS,
    ERROR_BODY_LOG_LIMIT,
    REQUEST_HEADERS,
    SEGMENTS_PATH,
    STATIONS_PATH,
)
from infra_explorer.domain.models import CollectionKind, FetchError, Record, Segment, Station

if TYPE_CHECKING:
    from aiohttp import ClientResponse, ClientSession

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _describe_validation_error(error: ValidationError) -> str:
    """Condense a pydantic error into ``field: message`` of its first problem."""
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "record"
    return f"{location}: {first.get('msg', 'invalid value')}"


class TrassenfinderClient:
    """Read-only client for station and segment collections.

    Every call performs exactly one GET request bounded by the configured
    timeout. Failures are raised as ``FetchError``; there are no retries here.
    """

    def __init__(
        self,
        session: "ClientSession",
        api_url: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        stations_path: str = STATIONS_PATH,
        segments_path: str = SEGMENTS_PATH,
        log_requests: bool = False,
    ) -> None:
        """Initialize the client.

        Args:
            session: Shared aiohttp session.
            api_url: Base URL of the infrastructure API.
            timeout_seconds: Total timeout of a single request.
            stations_path: Path of the station collection below the base URL.
            segments_path: Path of the segment collection below the base URL.
            log_requests: Log every outgoing request.
        """
        self._session = session
        self._api_url = api_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._paths = {
            CollectionKind.STATIONS: stations_path.strip("/"),
            CollectionKind.SEGMENTS: segments_path.strip("/"),
        }
        self._log_requests = log_requests

    def url_for(self, kind: CollectionKind) -> str:
        return f"{self._api_url}/{self._paths[kind]}"

    async def fetch_stations(self) -> list[Station]:
        """Fetch all stations.

        Raises:
            FetchError: On network failure, timeout, non-2xx status or bad payload.
        """
        url = self.url_for(CollectionKind.STATIONS)
        records = await self._get_records(url)
        return self._decode_records(records, Station, url)

    async def fetch_segments(self) -> list[Segment]:
        """Fetch all segments.

        Raises:
            FetchError: On network failure, timeout, non-2xx status or bad payload.
        """
        url = self.url_for(CollectionKind.SEGMENTS)
        records = await self._get_records(url)
        return self._decode_records(records, Segment, url)

    async def fetch(self, kind: CollectionKind) -> list[Record]:
        """Fetch the collection of the given kind."""
        if kind is CollectionKind.STATIONS:
            return list(await self.fetch_stations())
        return list(await self.fetch_segments())

    async def _log_error_response(self, response: "ClientResponse", url: str) -> None:
        """Log error response details."""
        try:
            error_text = await response.text()
        except (aiohttp.ClientError, UnicodeDecodeError):
            error_text = ""
        error_body = error_text[:ERROR_BODY_LOG_LIMIT] if error_text else "(empty response body)"
        content_type = response.headers.get("Content-Type", "unknown")
        logger.error(
            f"Infrastructure API returned status {response.status} for {url}: "
            f"{error_body} (Content-Type: {content_type})"
        )

    async def _read_json(self, response: "ClientResponse", url: str) -> Any:
        if not 200 <= response.status < 300:
            await self._log_error_response(response, url)
            raise FetchError.server_error(response.status)

        try:
            # The API does not always label its JSON correctly, so skip the content type check
            return await response.json(content_type=None)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Response from {url} is not valid JSON: {e}")
            raise FetchError.decode_error("response is not valid JSON") from e

    async def _get_records(self, url: str) -> list[dict[str, Any]]:
        """Perform the GET request and return the raw record list."""
        if self._log_requests:
            log_api_request("GET", url, headers=REQUEST_HEADERS)

        try:
            async with self._session.get(
                url, headers=REQUEST_HEADERS, timeout=self._timeout
            ) as response:
                payload = await self._read_json(response, url)
        except TimeoutError as e:
            logger.warning(f"Request to {url} timed out")
            raise FetchError.timeout() from e
        except aiohttp.ClientError as e:
            logger.warning(f"Request to {url} failed: {e}")
            raise FetchError.network(str(e) or type(e).__name__) from e

        return self._extract_records(payload, url)

    @staticmethod
    def _extract_records(payload: Any, url: str) -> list[dict[str, Any]]:
        """Check the payload is a JSON array of objects."""
        if not isinstance(payload, list):
            logger.warning(f"Expected a JSON array from {url}, got {type(payload).__name__}")
            raise FetchError.decode_error("expected a JSON array")

        for index, record in enumerate(payload):
            if not isinstance(record, dict):
                raise FetchError.decode_error(f"record {index} is not an object")
        return payload

    @staticmethod
    def _decode_records(
        records: list[dict[str, Any]], model: type[ModelT], url: str
    ) -> list[ModelT]:
        """Validate raw records into domain models.

        Unknown fields are kept as metadata; a record lacking its identifier
        fields fails the whole response.
        """
        decoded: list[ModelT] = []
        for index, record in enumerate(records):
            try:
                decoded.append(model.model_validate(record))
            except ValidationError as e:
                detail = _describe_validation_error(e)
                logger.warning(f"Invalid {model.__name__.lower()} record {index} from {url}: {detail}")
                raise FetchError.decode_error(f"record {index}: {detail}") from e

        logger.debug(f"Decoded {len(decoded)} {model.__name__.lower()} records from {url}")
        return decoded

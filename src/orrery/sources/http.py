"""HTTP client for the temporal entity/relationship store."""

import logging
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from orrery.config import settings
from orrery.models import Entity, Relationship
from orrery.models.entity import parse_datetime, parse_label, parse_strength
from orrery.sources.base import SourceError, TimeWindow

logger = logging.getLogger(__name__)

# The store names relationship endpoints person1/person2
_ENDPOINT_KEYS = {
    "source_id": ("source_id", "person1_id"),
    "target_id": ("target_id", "person2_id"),
    "source_name": ("source_name", "person1_name"),
    "target_name": ("target_name", "person2_name"),
}


def _first(record: dict, keys: tuple[str, ...]) -> Any:
    for key in keys:
        if record.get(key) is not None:
            return record[key]
    return None


def parse_relationship(record: dict) -> Relationship:
    """Map one store record onto a Relationship."""
    source_id = _first(record, _ENDPOINT_KEYS["source_id"])
    target_id = _first(record, _ENDPOINT_KEYS["target_id"])
    if source_id is None or target_id is None:
        raise SourceError(f"Relationship record {record.get('id')!r} has no endpoints")

    return Relationship(
        id=record.get("id", f"{source_id}-{target_id}"),
        source_id=int(source_id),
        target_id=int(target_id),
        strength=parse_strength(record.get("strength")),
        relationship_type=parse_label(record.get("relationship_type")),
        classification=parse_label(record.get("classification")),
        start_time=parse_datetime(record.get("start_time")),
        end_time=parse_datetime(record.get("end_time")),
        source_name=_first(record, _ENDPOINT_KEYS["source_name"]),
        target_name=_first(record, _ENDPOINT_KEYS["target_name"]),
    )


class HttpSource:
    """
    Blocking client for ``GET /people`` and ``GET /relationships``.

    Calls are synchronous; the snapshot loader runs them in a worker
    thread. Every transport or decoding failure surfaces as SourceError.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = (base_url or settings.source_base_url).rstrip("/")
        self.timeout = timeout or settings.source_timeout
        self.max_retries = max_retries if max_retries is not None else settings.source_max_retries
        self._session = session

    def _get_session(self) -> requests.Session:
        """Get or create requests session with retrying adapter."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({"Accept": "application/json"})
            adapter = HTTPAdapter(max_retries=Retry(total=self.max_retries, backoff_factor=0.5))
            self._session.mount("http://", adapter)
            self._session.mount("https://", adapter)
        return self._session

    def close(self) -> None:
        """Close the HTTP session."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def _get_json(self, path: str, params: dict[str, str] | None = None) -> list[dict]:
        url = f"{self.base_url}/{path}"
        try:
            response = self._get_session().get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise SourceError(f"Request to {url} failed: {e}") from e
        except ValueError as e:
            raise SourceError(f"Invalid JSON from {url}: {e}") from e

        if not isinstance(data, list):
            raise SourceError(f"Expected a list from {url}, got {type(data).__name__}")
        return data

    def list_entities(self) -> list[Entity]:
        records = self._get_json("people")
        try:
            entities = [Entity.from_dict(r) for r in records]
        except (KeyError, TypeError, ValueError) as e:
            raise SourceError(f"Malformed entity record: {e}") from e
        logger.debug(f"Fetched {len(entities)} entities")
        return entities

    def list_relationships(self, window: TimeWindow) -> list[Relationship]:
        records = self._get_json("relationships", params=window.to_params())
        try:
            relationships = [parse_relationship(r) for r in records]
        except (KeyError, TypeError, ValueError) as e:
            raise SourceError(f"Malformed relationship record: {e}") from e
        logger.debug(f"Fetched {len(relationships)} relationships for window ending {window.end.isoformat()}")
        return relationships

"""Encoding of the cached full-collection listing.

The listing is stored as a JSON array of task objects. The bytes written on
a miss are the bytes served on later hits, so HTTP callers see identical
payloads for as long as the entry lives.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from pydantic import TypeAdapter, ValidationError

from tasklist.exceptions import CacheError
from tasklist.models import Task, TaskResponse

logger = logging.getLogger(__name__)

_listing = TypeAdapter(list[TaskResponse])


def encode_snapshot(tasks: Iterable[Task | TaskResponse]) -> bytes:
    records = [TaskResponse.model_validate(task) for task in tasks]
    return _listing.dump_json(records)


def decode_snapshot(raw: bytes, key: str) -> list[TaskResponse]:
    try:
        return _listing.validate_json(raw)
    except ValidationError as e:
        logger.error(f"Unreadable snapshot under {key}: {e}")
        raise CacheError("decode", key, "Cached listing is corrupt") from e


@dataclass(frozen=True)
class Snapshot:
    """A serialized listing and whether it came from the cache."""

    key: str
    payload: bytes
    hit: bool

    def tasks(self) -> list[TaskResponse]:
        return decode_snapshot(self.payload, self.key)

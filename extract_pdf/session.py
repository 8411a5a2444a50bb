"""Flow records and a transactional in-memory session.

The hosting pipeline owns record transport. This module models the part of
it the processor relies on: reading an inbound record, creating child
records, routing records to relationships and committing or discarding that
work as a unit.
"""

from __future__ import annotations

import logging
import uuid
from collections import deque
from dataclasses import dataclass, field, replace
from typing import Deque, Dict, Iterable, List, Mapping, Optional, Protocol

from .exceptions import ExtractPDFError

logger = logging.getLogger(__name__)


class SessionError(ExtractPDFError):
    """Exception raised when the session is used inconsistently."""

    pass


@dataclass(frozen=True)
class Relationship:
    """Named outbound channel."""

    name: str
    description: str = ""


SUCCESS = Relationship("success", "Outputs the extracted content")
FAILURE = Relationship("failure", "Outputs the original content on failure")


@dataclass(frozen=True)
class FlowFile:
    """Immutable record: byte content plus string attributes."""

    content: bytes = b""
    attributes: Mapping[str, str] = field(default_factory=dict)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    parent_id: Optional[str] = None

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)


class ProcessSession(Protocol):
    """Operations the processor needs from the host's session."""

    def get(self) -> Optional[FlowFile]: ...

    def read(self, flowfile: FlowFile) -> bytes: ...

    def create(self, parent: Optional[FlowFile] = None) -> FlowFile: ...

    def put_attribute(self, flowfile: FlowFile, name: str, value: str) -> FlowFile: ...

    def write(self, flowfile: FlowFile, content: bytes) -> FlowFile: ...

    def transfer(self, flowfile: FlowFile, relationship: Relationship) -> None: ...

    def remove(self, flowfile: FlowFile) -> None: ...

    def rollback_created(self) -> None: ...

    def commit(self) -> None: ...


class MemorySession:
    """Queue-backed session that stages work until :meth:`commit`.

    Records created since the last commit can be discarded with
    :meth:`rollback_created`; committed transfers are published in
    :attr:`transferred`. Not thread-safe.
    """

    def __init__(
        self,
        flowfiles: Iterable[FlowFile] = (),
        relationships: Iterable[Relationship] = (SUCCESS, FAILURE),
    ) -> None:
        self.queue: Deque[FlowFile] = deque(flowfiles)
        self.relationships = {r.name: r for r in relationships}
        self.transferred: Dict[str, List[FlowFile]] = {
            name: [] for name in self.relationships
        }
        self.removed: List[FlowFile] = []
        self._taken: Dict[str, FlowFile] = {}
        self._created: Dict[str, FlowFile] = {}
        self._routes: Dict[str, str] = {}
        self._removed: Dict[str, FlowFile] = {}

    def enqueue(self, content: bytes, attributes: Optional[Mapping[str, str]] = None) -> FlowFile:
        """Add an inbound record to the queue."""
        flowfile = FlowFile(content=content, attributes=dict(attributes or {}))
        self.queue.append(flowfile)
        return flowfile

    def get(self) -> Optional[FlowFile]:
        if not self.queue:
            return None
        flowfile = self.queue.popleft()
        self._taken[flowfile.id] = flowfile
        return flowfile

    def read(self, flowfile: FlowFile) -> bytes:
        return self._current(flowfile).content

    def create(self, parent: Optional[FlowFile] = None) -> FlowFile:
        flowfile = FlowFile(parent_id=parent.id if parent is not None else None)
        self._created[flowfile.id] = flowfile
        return flowfile

    def put_attribute(self, flowfile: FlowFile, name: str, value: str) -> FlowFile:
        current = self._current(flowfile)
        attributes = dict(current.attributes)
        attributes[name] = value
        return self._replace(replace(current, attributes=attributes))

    def write(self, flowfile: FlowFile, content: bytes) -> FlowFile:
        return self._replace(replace(self._current(flowfile), content=bytes(content)))

    def transfer(self, flowfile: FlowFile, relationship: Relationship) -> None:
        if relationship.name not in self.relationships:
            raise SessionError(f"Unknown relationship: {relationship.name}")
        self._current(flowfile)
        self._routes[flowfile.id] = relationship.name

    def remove(self, flowfile: FlowFile) -> None:
        current = self._current(flowfile)
        self._routes.pop(flowfile.id, None)
        self._removed[flowfile.id] = current

    def rollback_created(self) -> None:
        """Discard every record created since the last commit."""
        for flowfile_id in self._created:
            self._routes.pop(flowfile_id, None)
        if self._created:
            logger.debug("Discarded %s uncommitted records", len(self._created))
        self._created.clear()

    def commit(self) -> None:
        """Publish staged transfers and removals.

        Raises:
            SessionError: If a taken or created record was neither
                transferred nor removed.
        """
        pending = {**self._taken, **self._created}
        unrouted = [
            fid for fid in pending if fid not in self._routes and fid not in self._removed
        ]
        if unrouted:
            raise SessionError(f"{len(unrouted)} records were not transferred or removed")
        for fid, flowfile in pending.items():
            if fid in self._routes:
                self.transferred[self._routes[fid]].append(flowfile)
        self.removed.extend(self._removed.values())
        self._taken.clear()
        self._created.clear()
        self._routes.clear()
        self._removed.clear()

    def _current(self, flowfile: FlowFile) -> FlowFile:
        for staged in (self._created, self._taken):
            if flowfile.id in staged:
                return staged[flowfile.id]
        raise SessionError(f"FlowFile {flowfile.id} does not belong to this session")

    def _replace(self, flowfile: FlowFile) -> FlowFile:
        if flowfile.id in self._created:
            self._created[flowfile.id] = flowfile
        else:
            self._taken[flowfile.id] = flowfile
        return flowfile

"""Session-scoped template cache.

NetFlow v9 data records cannot be decoded without the template that
describes them, and templates arrive in earlier (often different)
packets. The cache holds the most recent definition per
(source_id, template_id) for the lifetime of a capture session.
"""

import threading
from collections.abc import Iterator

from flowschema.common.logging import get_logger
from flowschema.common.metrics import TEMPLATE_CACHE_SIZE
from flowschema.decoding.templates import Definition

logger = get_logger(__name__)


class TemplateCache:
    """Cache for NetFlow v9 templates and options templates.

    Templates are keyed by (source_id, template_id). A redefinition
    replaces the previous entry outright. There is no expiry: entries
    live as long as the cache does.

    Every operation holds an internal lock, so one cache can be shared
    by decoder threads. Callers that decode concurrently must still
    apply a source's template flow sets before its data flow sets.
    """

    def __init__(self) -> None:
        self._templates: dict[tuple[int, int], Definition] = {}
        self._lock = threading.Lock()

    def get(self, source_id: int, template_id: int) -> Definition | None:
        """Get a template from cache.

        Args:
            source_id: Source ID from the packet header.
            template_id: Template ID (the data flow set ID).

        Returns:
            The cached definition, or None if none was received.
        """
        with self._lock:
            return self._templates.get((source_id, template_id))

    def put(self, source_id: int, template_id: int, definition: Definition) -> None:
        """Store a template, replacing any existing entry for the key.

        Args:
            source_id: Source ID from the packet header.
            template_id: Template ID being defined.
            definition: Parsed template or options template.
        """
        key = (source_id, template_id)
        with self._lock:
            previous = self._templates.get(key)
            self._templates[key] = definition

        if previous is None:
            TEMPLATE_CACHE_SIZE.inc()

        if previous is not None and previous != definition:
            logger.info(
                "Template redefined",
                source_id=source_id,
                template_id=template_id,
                previous_fields=len(previous.record_fields),
                fields=len(definition.record_fields),
            )
        else:
            logger.debug(
                "Cached template",
                source_id=source_id,
                template_id=template_id,
                fields=len(definition.record_fields),
                min_record_length=definition.min_record_length,
            )

    def templates_for(self, source_id: int) -> dict[int, Definition]:
        """Snapshot of every definition received from one source."""
        with self._lock:
            return {
                template_id: definition
                for (source, template_id), definition in self._templates.items()
                if source == source_id
            }

    def sources(self) -> set[int]:
        """Source IDs with at least one cached definition."""
        with self._lock:
            return {source for source, _ in self._templates}

    def items(self) -> list[tuple[tuple[int, int], Definition]]:
        """Snapshot of all entries as ((source_id, template_id), definition)."""
        with self._lock:
            return list(self._templates.items())

    def remove_source(self, source_id: int) -> int:
        """Forget every template of one source, e.g. after an exporter restart.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            keys = [key for key in self._templates if key[0] == source_id]
            for key in keys:
                del self._templates[key]

        TEMPLATE_CACHE_SIZE.dec(len(keys))
        return len(keys)

    def clear(self) -> None:
        """Clear all templates."""
        with self._lock:
            removed = len(self._templates)
            self._templates.clear()
        TEMPLATE_CACHE_SIZE.dec(removed)

    @property
    def size(self) -> int:
        """Get number of cached templates."""
        with self._lock:
            return len(self._templates)

    def __len__(self) -> int:
        return self.size

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._templates

    def __iter__(self) -> Iterator[tuple[int, int]]:
        return iter([key for key, _ in self.items()])

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional

from .bus import ChangeEvent, EventBus


class LiveCollection:
    """Identifier-keyed snapshot kept current from change events.

    Updates may arrive duplicated or out of order; an upsert simply overwrites
    the entry for its id and a delete of an unknown id is ignored. Consumers
    read ``snapshot()`` as a plain list.
    """

    def __init__(self, id_of: Callable[[Any], str], items: Iterable[Any] = ()) -> None:
        self._id_of = id_of
        self._items: Dict[str, Any] = {}
        self.merge(items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._items

    def get(self, doc_id: str) -> Optional[Any]:
        return self._items.get(doc_id)

    def merge(self, items: Iterable[Any]) -> None:
        for item in items:
            self._items[str(self._id_of(item))] = item

    def replace(self, items: Iterable[Any]) -> None:
        self._items.clear()
        self.merge(items)

    def apply(self, event: ChangeEvent) -> None:
        if event.kind == "delete":
            self._items.pop(event.doc_id, None)
        elif event.kind == "upsert" and event.payload is not None:
            self._items[event.doc_id] = event.payload

    def follow(self, bus: EventBus, topic: str) -> Callable[[], None]:
        """Subscribe to ``topic``; returns the unsubscribe callable."""
        return bus.subscribe(topic, self.apply)

    def snapshot(self) -> List[Any]:
        return list(self._items.values())


def merge_by_id(id_of: Callable[[Any], str], *groups: Iterable[Any]) -> List[Any]:
    """Merge several result lists, later duplicates overwriting earlier ones."""
    collection = LiveCollection(id_of)
    for group in groups:
        collection.merge(group)
    return collection.snapshot()

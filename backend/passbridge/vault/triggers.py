"""
Retrieval triggers - the button side of a password block.

A trigger is disabled while its own fetch is in flight and re-enabled exactly
once when the fetch settles. Overlapping fires of the same trigger are
ignored; different triggers run independently.
"""

from dataclasses import dataclass, field
from typing import Optional

from ..clipboard import Clipboard, ClipboardError
from ..logging import get_logger
from ..notifications import Notifier
from .models import Failure, Property, RetrievalResult, Secret
from .providers import VaultProvider

logger = get_logger("vault.triggers")


@dataclass
class RetrievalTrigger:
    source: str
    property: Property
    enabled: bool = field(default=True)

    @property
    def label(self) -> str:
        return self.property.label

    async def fire(
        self,
        provider: VaultProvider,
        clipboard: Clipboard,
        notifier: Notifier,
    ) -> Optional[RetrievalResult]:
        """
        Fetch, deliver and notify.

        Returns:
            The fetch result, or None if the trigger was already in flight
        """
        if not self.enabled:
            logger.debug(f"Ignoring {self.label} for {self.source}: already in flight")
            return None

        self.enabled = False
        try:
            result = await provider.fetch(self.property, self.source)
            if isinstance(result, Secret):
                try:
                    await clipboard.write(result.value)
                except ClipboardError as e:
                    result = Failure(str(e))
                else:
                    notifier.notify("Copied")
                    return result
            notifier.notify(f"Failed to copy: {result.reason}", level="error")
            return result
        finally:
            self.enabled = True


class TriggerBoard:
    """One trigger per (source, property), created on first use."""

    def __init__(self):
        self._triggers: dict[tuple[str, Property], RetrievalTrigger] = {}

    def get(self, source: str, property: Property | str) -> RetrievalTrigger:
        prop = Property.parse(property)
        key = (source, prop)
        trigger = self._triggers.get(key)
        if trigger is None:
            trigger = RetrievalTrigger(source=source, property=prop)
            self._triggers[key] = trigger
        return trigger

    def in_flight(self) -> list[RetrievalTrigger]:
        return [t for t in self._triggers.values() if not t.enabled]

from __future__ import annotations

import logging
from typing import Optional

from .operations import Operation


class PendingSlot:
    """
    Holds the next operation to apply. Not a queue: a new request replaces an
    unapplied one, so only the newest request before the next tick survives.
    """

    def __init__(self) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self._operation: Optional[Operation] = None

    def submit(self, op: Operation) -> None:
        if self._operation is not None:
            self.logger.debug("Offene Anfrage %r ersetzt durch %r", self._operation, op)
        self._operation = op

    def take(self) -> Optional[Operation]:
        op = self._operation
        self._operation = None
        return op

    def peek(self) -> Optional[Operation]:
        return self._operation

    def has_pending(self) -> bool:
        return self._operation is not None

    def clear(self) -> None:
        self._operation = None

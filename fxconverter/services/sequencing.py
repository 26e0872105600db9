from __future__ import annotations

from collections import OrderedDict
from collections.abc import Awaitable
from typing import TypeVar

T = TypeVar("T")


class LatestResultGate:
    """Drops results of overlapping calls that were superseded by a newer one.

    Each ``run`` takes a ticket before awaiting; only the holder of the most
    recently issued ticket gets its result back, older ones receive ``None``.
    """

    def __init__(self) -> None:
        self._issued = 0

    @property
    def latest(self) -> int:
        return self._issued

    def issue(self) -> int:
        self._issued += 1
        return self._issued

    def is_current(self, ticket: int) -> bool:
        return ticket == self._issued

    async def run(self, awaitable: Awaitable[T]) -> T | None:
        ticket = self.issue()
        result = await awaitable
        if not self.is_current(ticket):
            return None
        return result


class SessionGates:
    """One ``LatestResultGate`` per caller session, least recently used evicted first."""

    def __init__(self, max_sessions: int = 1024) -> None:
        self._max_sessions = max_sessions
        self._gates: OrderedDict[str, LatestResultGate] = OrderedDict()

    def __len__(self) -> int:
        return len(self._gates)

    def for_session(self, session_id: str) -> LatestResultGate:
        gate = self._gates.get(session_id)
        if gate is None:
            gate = LatestResultGate()
            self._gates[session_id] = gate
        self._gates.move_to_end(session_id)
        while len(self._gates) > self._max_sessions:
            self._gates.popitem(last=False)
        return gate

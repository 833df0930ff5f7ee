from __future__ import annotations

import logging
from typing import FrozenSet, List, Optional, Protocol, Sequence, Tuple

from .catalog import split_catalog
from .errors import PersistenceFailure
from .items import Item
from .moves import apply_move, attached_ids, partition_problems, toggle_expanded, undo
from .state import SOURCE_POOL, AssignmentState, UndoHistory, UndoStep

LOGGER = logging.getLogger(__name__)


class Gateway(Protocol):
    def load(self) -> Optional[AssignmentState]: ...

    def save(self, state: AssignmentState) -> bool: ...


class AssignmentStore:
    """Owns one session's state and undo history.

    Every transition replaces the whole state value; nothing is mutated in
    place. Commands must be applied one at a time.
    """

    def __init__(self, state: AssignmentState, history: UndoHistory = ()) -> None:
        self._state = state
        self._history: UndoHistory = tuple(history)
        self.universe: FrozenSet[int] = frozenset(it.id for it in state.all_items())

    @classmethod
    def load(cls, gateway: Optional[Gateway], catalog: Sequence[Item]) -> 'AssignmentStore':
        """Starts from the saved snapshot if there is one, else a fresh split of catalog."""
        state = gateway.load() if gateway is not None else None
        if state is None:
            LOGGER.info("no saved snapshot; splitting catalog of %d items", len(catalog))
            state = split_catalog(catalog)
        else:
            LOGGER.info("loaded snapshot: %d groups, %d pool items", len(state.groups), len(state.pool))
        return cls(state)

    def current_state(self) -> AssignmentState:
        return self._state

    @property
    def history(self) -> UndoHistory:
        return self._history

    @property
    def can_undo(self) -> bool:
        return bool(self._history)

    def move(self, item_id: int, source_index: int, dest_index: int, source_kind: str = SOURCE_POOL) -> UndoStep:
        state, history, step = apply_move(self._state, self._history, item_id, source_kind, source_index, dest_index)
        self._state, self._history = state, history
        return step

    def undo(self) -> bool:
        """Returns False when there was nothing to undo."""
        if not self._history:
            return False
        self._state, self._history = undo(self._state, self._history)
        return True

    def toggle_expanded(self, group_id: int) -> None:
        self._state = toggle_expanded(self._state, group_id)

    def attached_ids(self) -> List[int]:
        return attached_ids(self._state)

    def verify(self) -> List[str]:
        return partition_problems(self._state, self.universe)

    def save(self, gateway: Gateway) -> bool:
        """Hands the state to gateway; clears the history only on acknowledged success."""
        state = self._state
        try:
            ok = gateway.save(state)
        except Exception as e:
            LOGGER.warning("save failed: %s", e)
            raise PersistenceFailure(str(e)) from e
        if not ok:
            LOGGER.warning("save not acknowledged")
            raise PersistenceFailure('save was not acknowledged')
        LOGGER.info("saved state; dropping %d undo steps", len(self._history))
        self._history = ()
        return True

    def snapshot(self) -> Tuple[AssignmentState, UndoHistory]:
        return self._state, self._history

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import replace
from typing import Iterable, List, Tuple

from .errors import InvalidMove
from .items import Group
from .state import SOURCE_POOL, AssignmentState, UndoHistory, UndoStep, pop_step, push_step

LOGGER = logging.getLogger(__name__)


def resolve_target_group(state: AssignmentState, dest_index: int) -> int:
    """Clamps a drop position to an existing group index.

    Dropping at or past the last slot targets the last group; a move never
    creates a group.
    """
    if not state.groups:
        raise InvalidMove('no group to move into')
    last = len(state.groups) - 1
    return max(0, min(int(dest_index), last))


def move(
    state: AssignmentState,
    item_id: int,
    source_kind: str,
    source_index: int,
    dest_index: int,
) -> Tuple[AssignmentState, UndoStep]:
    """Moves a pool item to the end of a group and returns the new state with its undo step."""
    if source_kind != SOURCE_POOL:
        raise InvalidMove(f"cannot move from {source_kind!r}; only the pool is a valid source")
    if not 0 <= source_index < len(state.pool):
        raise InvalidMove(f"pool index {source_index} out of range")
    item = state.pool[source_index]
    if item.id != item_id:
        raise InvalidMove(f"item {item_id} is not at pool index {source_index}")

    target = resolve_target_group(state, dest_index)
    group = state.groups[target]
    pool = state.pool[:source_index] + state.pool[source_index + 1:]
    next_state = replace(state, pool=pool).with_group(target, group.with_appended(item))
    return next_state, UndoStep(group_id=group.id, item_id=item.id)


def apply_move(
    state: AssignmentState,
    history: UndoHistory,
    item_id: int,
    source_kind: str,
    source_index: int,
    dest_index: int,
) -> Tuple[AssignmentState, UndoHistory, UndoStep]:
    """move() plus pushing the resulting step onto history."""
    next_state, step = move(state, item_id, source_kind, source_index, dest_index)
    return next_state, push_step(history, step), step


def undo(state: AssignmentState, history: UndoHistory) -> Tuple[AssignmentState, UndoHistory]:
    """Reverses the most recent move. A no-op on an empty history.

    The group is found by id, not by position. A step whose group or item
    has gone away is consumed without touching the state. The returned
    item lands in the pool, which is then sorted ascending by id.
    """
    step, rest = pop_step(history)
    if step is None:
        return state, history

    idx = state.group_index(step.group_id)
    if idx is None:
        LOGGER.debug("stale undo: group %s not found", step.group_id)
        return state, rest
    group = state.groups[idx]
    item = next((it for it in group.children if it.id == step.item_id), None)
    if item is None:
        LOGGER.debug("stale undo: item %s not in group %s", step.item_id, step.group_id)
        return state, rest

    pool = tuple(sorted(state.pool + (item,), key=lambda it: it.id))
    next_state = replace(state, pool=pool).with_group(idx, group.without_child(item.id))
    return next_state, rest


def toggle_expanded(state: AssignmentState, group_id: int) -> AssignmentState:
    """Flips the display-only expanded flag of a group."""
    idx = state.group_index(group_id)
    if idx is None:
        raise LookupError(f"group {group_id} not found")
    return state.with_group(idx, state.groups[idx].toggled())


def attached_ids(state: AssignmentState) -> List[int]:
    """Ids currently assigned to any group, in group order then move order."""
    out: List[int] = []
    for g in state.groups:
        out.extend(g.child_ids)
    return out


def partition_problems(state: AssignmentState, universe: Iterable[int]) -> List[str]:
    """Lists violations of the partition invariant against the given universe of ids."""
    seen = Counter(it.id for it in state.all_items())
    expected = set(universe)
    problems: List[str] = []
    for item_id, n in sorted(seen.items()):
        if n > 1:
            problems.append(f"item {item_id} appears {n} times")
        if item_id not in expected:
            problems.append(f"item {item_id} is not in the catalog")
    for item_id in sorted(expected - set(seen)):
        problems.append(f"item {item_id} is missing")
    return problems


def duplicate_group_ids(groups: Iterable[Group]) -> List[int]:
    counts = Counter(g.id for g in groups)
    return sorted(gid for gid, n in counts.items() if n > 1)

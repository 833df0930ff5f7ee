from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterator, Optional, Tuple

from .items import Group, Item

SOURCE_POOL = 'pool'


@dataclass(frozen=True)
class UndoStep:
    """Records that item_id was most recently appended to the group group_id."""
    group_id: int
    item_id: int


UndoHistory = Tuple[UndoStep, ...]  # top of stack is the last element


@dataclass(frozen=True)
class AssignmentState:
    """The current partition: unassigned pool plus ordered groups."""
    pool: Tuple[Item, ...] = ()
    groups: Tuple[Group, ...] = ()

    def group_index(self, group_id: int) -> Optional[int]:
        for i, g in enumerate(self.groups):
            if g.id == group_id:
                return i
        return None

    def group(self, group_id: int) -> Optional[Group]:
        idx = self.group_index(group_id)
        return None if idx is None else self.groups[idx]

    def with_group(self, idx: int, group: Group) -> 'AssignmentState':
        groups = self.groups[:idx] + (group,) + self.groups[idx + 1:]
        return replace(self, groups=groups)

    def all_items(self) -> Iterator[Item]:
        """Every item in the partition: pool first, then each group's children."""
        yield from self.pool
        for g in self.groups:
            yield from g.children

    def pretty(self) -> str:
        lines = ['Groups:']
        for i, g in enumerate(self.groups):
            lines.append(f"{i:>3} {g.pretty()}")
        lines.append('Pool:')
        for i, it in enumerate(self.pool):
            lines.append(f"{i:>3}   {it.id}: {it.description}")
        return "\n".join(lines)


def push_step(history: UndoHistory, step: UndoStep) -> UndoHistory:
    return tuple(history) + (step,)


def pop_step(history: UndoHistory) -> Tuple[Optional[UndoStep], UndoHistory]:
    """Returns (top, rest). top is None when the history is empty."""
    if not history:
        return None, tuple(history)
    return history[-1], tuple(history[:-1])

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple


@dataclass(frozen=True)
class Item:
    """A catalog entry. Items are relocated by the engine, never created or destroyed."""
    id: int
    description: str


@dataclass(frozen=True)
class Group:
    """An ordered container of assigned items with a stable identity."""
    id: int
    description: str
    children: Tuple[Item, ...] = ()  # append order == move order
    expanded: bool = False  # display only

    @property
    def child_ids(self) -> Tuple[int, ...]:
        return tuple(it.id for it in self.children)

    def has_child(self, item_id: int) -> bool:
        return any(it.id == item_id for it in self.children)

    def with_appended(self, item: Item) -> 'Group':
        return replace(self, children=self.children + (item,))

    def without_child(self, item_id: int) -> 'Group':
        return replace(self, children=tuple(it for it in self.children if it.id != item_id))

    def toggled(self) -> 'Group':
        return replace(self, expanded=not self.expanded)

    def pretty(self) -> str:
        """One display line for the group, plus child lines when expanded."""
        marker = ('▼' if self.expanded else '►') if self.children else ' '
        lines = [f"{marker} [{self.id}] {self.description} ({len(self.children)})"]
        if self.expanded:
            for it in self.children:
                lines.append(f"    - {it.id}: {it.description}")
        return "\n".join(lines)

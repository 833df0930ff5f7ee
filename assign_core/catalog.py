from __future__ import annotations

import random
from typing import List, Optional, Sequence, Tuple

from .items import Group, Item
from .moves import partition_problems
from .state import AssignmentState


def placeholder_catalog(count: int = 8, seed: Optional[int] = None) -> Tuple[Item, ...]:
    """Creates items 1..count described as 'Item n'. A seed shuffles their order."""
    if count < 0:
        raise ValueError('catalog size must be non-negative')
    items: List[Item] = [Item(id=i, description=f"Item {i}") for i in range(1, count + 1)]
    if seed is not None:
        random.Random(seed).shuffle(items)
    return tuple(items)


def split_catalog(items: Sequence[Item]) -> AssignmentState:
    """Fresh split: the first half become (empty) groups, the second half the pool."""
    ids = [it.id for it in items]
    if len(ids) != len(set(ids)):
        raise ValueError('Invalid catalog: duplicate item ids')
    half = len(items) // 2
    groups = tuple(Group(id=it.id, description=it.description) for it in items[:half])
    pool = tuple(items[half:])
    return AssignmentState(pool=pool, groups=groups)


def catalog_problems(state: AssignmentState, items: Sequence[Item]) -> List[str]:
    """Checks a state against the split of items: same group ids, same assignable ids."""
    fresh = split_catalog(items)
    problems: List[str] = []
    want_groups = [g.id for g in fresh.groups]
    got_groups = [g.id for g in state.groups]
    if sorted(got_groups) != sorted(want_groups):
        problems.append(f"groups {sorted(got_groups)} do not match catalog groups {sorted(want_groups)}")
    problems.extend(partition_problems(state, (it.id for it in fresh.pool)))
    return problems

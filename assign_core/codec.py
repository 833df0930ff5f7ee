from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from .items import Group, Item
from .moves import attached_ids, duplicate_group_ids
from .state import AssignmentState, UndoHistory, UndoStep

CHILDREN_RECORDS = 'records'
CHILDREN_IDS = 'ids'


def item_to_json(it: Item) -> Dict[str, Any]:
    return {"id": int(it.id), "description": str(it.description)}


def item_from_json(obj: Mapping[str, Any]) -> Item:
    if not isinstance(obj, Mapping):
        raise ValueError(f"item must be an object, got {type(obj).__name__}")
    return Item(id=int(obj["id"]), description=str(obj.get("description", "")))


def group_to_json(g: Group, children: str = CHILDREN_RECORDS) -> Dict[str, Any]:
    if children == CHILDREN_IDS:
        kids: List[Any] = list(g.child_ids)
    else:
        kids = [item_to_json(it) for it in g.children]
    return {
        "id": int(g.id),
        "description": str(g.description),
        "children": kids,
        "isExpanded": bool(g.expanded),
        "predecessorCount": len(g.children),
    }


def group_from_json(obj: Mapping[str, Any], lookup: Optional[Mapping[int, Item]] = None) -> Group:
    """Builds a Group. Children given as bare ids are resolved through lookup."""
    if not isinstance(obj, Mapping):
        raise ValueError(f"group must be an object, got {type(obj).__name__}")
    kids: List[Item] = []
    for child in obj.get("children") or []:
        if isinstance(child, Mapping):
            kids.append(item_from_json(child))
            continue
        cid = int(child)
        if lookup is None or cid not in lookup:
            raise ValueError(f"unknown child id {cid}")
        kids.append(lookup[cid])
    return Group(
        id=int(obj["id"]),
        description=str(obj.get("description", "")),
        children=tuple(kids),
        expanded=bool(obj.get("isExpanded", False)),
    )


def state_to_json(s: AssignmentState, children: str = CHILDREN_RECORDS) -> Dict[str, Any]:
    return {
        "groups": [group_to_json(g, children) for g in s.groups],
        "pool": [item_to_json(it) for it in s.pool],
        "predecessors": attached_ids(s),
    }


def json_to_state(obj: Mapping[str, Any], lookup: Optional[Mapping[int, Item]] = None) -> AssignmentState:
    """Decodes a state and rejects one where an id appears twice."""
    if not isinstance(obj, Mapping):
        raise ValueError("state must be an object")
    pool = tuple(item_from_json(x) for x in obj.get("pool") or [])
    groups = tuple(group_from_json(g, lookup) for g in obj.get("groups") or [])
    state = AssignmentState(pool=pool, groups=groups)
    dup_groups = duplicate_group_ids(groups)
    if dup_groups:
        raise ValueError(f"duplicate group ids: {dup_groups}")
    seen = set()
    for it in state.all_items():
        if it.id in seen:
            raise ValueError(f"item {it.id} appears more than once")
        seen.add(it.id)
    return state


def history_to_json(history: UndoHistory) -> List[Dict[str, int]]:
    return [{"groupId": int(st.group_id), "itemId": int(st.item_id)} for st in history]


def json_to_history(arr: Optional[List[Mapping[str, Any]]]) -> UndoHistory:
    return tuple(UndoStep(group_id=int(x["groupId"]), item_id=int(x["itemId"])) for x in arr or [])

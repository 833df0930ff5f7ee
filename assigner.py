from __future__ import annotations

# Facade module that re-exports the assignment core.
# The Flask app and tests import from here; single-responsibility modules
# live under assign_core/*.

from assign_core.items import Item, Group  # noqa: F401
from assign_core.state import (  # noqa: F401
    SOURCE_POOL,
    AssignmentState,
    UndoHistory,
    UndoStep,
    pop_step,
    push_step,
)
from assign_core.errors import InvalidMove, PersistenceFailure  # noqa: F401
from assign_core.moves import (  # noqa: F401
    resolve_target_group,
    move,
    apply_move,
    undo,
    toggle_expanded,
    attached_ids,
    partition_problems,
)
from assign_core.catalog import placeholder_catalog, split_catalog, catalog_problems  # noqa: F401
from assign_core.codec import (  # noqa: F401
    CHILDREN_IDS,
    CHILDREN_RECORDS,
    item_to_json,
    item_from_json,
    group_to_json,
    group_from_json,
    state_to_json,
    json_to_state,
    history_to_json,
    json_to_history,
)
from assign_core.db import (  # noqa: F401
    db_store_snapshot,
    db_load_snapshot,
    SnapshotGateway,
)
from assign_core.store import AssignmentStore  # noqa: F401

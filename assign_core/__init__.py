"""
Assignment core Python package.

Pure data structures and transition functions for partitioning a closed
set of items into an unassigned pool and an ordered list of groups.
Modules:
- items.py: Item, Group
- state.py: AssignmentState, UndoStep, history helpers
- moves.py: move / undo transitions and partition checks
- catalog.py: placeholder catalog and fresh split
- codec.py: JSON shapes
- db.py: sqlite snapshot gateway
- store.py: AssignmentStore session wrapper
"""

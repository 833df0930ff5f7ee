from __future__ import annotations

import argparse
import logging
from typing import List

from .catalog import placeholder_catalog
from .db import SnapshotGateway
from .errors import InvalidMove, PersistenceFailure
from .store import AssignmentStore

HELP = """Commands:
  show                      print groups and pool
  move <pool_index> <group_index>
  undo
  toggle <group_id>
  save
  quit"""


def _parse_ints(args: List[str], n: int) -> List[int]:
    if len(args) != n:
        raise ValueError(f"expected {n} numbers")
    return [int(a) for a in args]


def main() -> None:
    parser = argparse.ArgumentParser(description='Assign pool items to groups, with undo')
    parser.add_argument('--db', default='data/assignments.db', help='SQLite DB file path')
    parser.add_argument('--size', type=int, default=8, help='Placeholder catalog size when nothing is saved')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for catalog order')
    parser.add_argument('--debug', action='store_true', help='Verbose logging')
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)
    gateway = SnapshotGateway(args.db)
    store = AssignmentStore.load(gateway, placeholder_catalog(args.size, seed=args.seed))
    print(store.current_state().pretty())
    print(HELP)

    while True:
        try:
            text = input('> ').strip()
        except EOFError:
            break
        if not text:
            continue
        cmd, *rest = text.split()
        if cmd in ('q', 'quit', 'exit'):
            break
        try:
            if cmd == 'show':
                pass
            elif cmd == 'move':
                src, dest = _parse_ints(rest, 2)
                pool = store.current_state().pool
                item_id = pool[src].id if 0 <= src < len(pool) else -1
                step = store.move(item_id, src, dest)
                print(f"Moved item {step.item_id} into group {step.group_id}")
            elif cmd == 'undo':
                if not store.undo():
                    print('Nothing to undo.')
            elif cmd == 'toggle':
                (gid,) = _parse_ints(rest, 1)
                store.toggle_expanded(gid)
            elif cmd == 'save':
                store.save(gateway)
                print('Save successful!')
            else:
                print(HELP)
                continue
        except (InvalidMove, LookupError, ValueError) as e:
            print(f"error: {e}")
            continue
        except PersistenceFailure as e:
            print(f"error: save failed ({e}); try again")
            continue
        print(store.current_state().pretty())
        if store.can_undo:
            print(f"({len(store.history)} undoable moves)")


if __name__ == '__main__':
    main()

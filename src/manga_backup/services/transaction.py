"""Scoped store transactions - commit on success, roll back on any exit by error."""

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, TypeVar

from manga_backup.io import LibraryStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


@contextmanager
def transaction(store: LibraryStore) -> Iterator[LibraryStore]:
    """Run the enclosed block inside one store transaction.

    A failing commit is rolled back like a failing block. The original
    exception is re-raised after rollback; a failing rollback is logged and
    does not mask it.
    """
    store.begin_transaction()
    try:
        yield store
        store.commit()
    except BaseException:
        try:
            store.rollback()
        except Exception:
            logger.exception("Rollback failed")
        raise


def run_in_transaction(store: LibraryStore, body: Callable[[], T]) -> T:
    """Call body inside transaction(store) and return its result."""
    with transaction(store):
        return body()

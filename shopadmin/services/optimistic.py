# Overview: Snapshot / apply / commit-or-rollback helper for optimistic UI updates.

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from .state import StateContainer

logger = logging.getLogger(__name__)


def run_optimistic(
    store: StateContainer,
    fields: tuple[str, ...],
    mutate: Callable[[], dict],
    call: Callable[[], Any],
    reconcile: Optional[Callable[[Any], dict]] = None,
):
    """
    Apply a local mutation before the server confirms it.

    1. snapshot the exact prior sub-state named by `fields`
    2. apply `mutate()` (returns the new values for those fields)
    3. run `call()` (the network request)
    4. success: apply `reconcile(result)` if given and return result
       failure: restore the snapshot and re-raise

    The rollback restores the snapshot taken in step 1, so concurrent edits to
    the same fields made while the call was in flight are discarded too.
    """
    before = store.snapshot(*fields)
    store._set(**mutate())

    try:
        result = call()
    except Exception:
        logger.info("Rolling back optimistic update on %s", type(store).__name__)
        store._set(**before)
        raise

    if reconcile is not None:
        changes = reconcile(result)
        if changes:
            store._set(**changes)
    return result

"""
Database utilities and transaction management.
"""

import functools

from asgiref.sync import sync_to_async
from django.db import transaction


def atomic_async(func):
    """
    Run a synchronous unit of work inside one database transaction.

    The wrapped function is executed in Django's sync thread, so every
    query it issues shares the same connection and the same
    ``transaction.atomic()`` block. Exceptions roll the block back and
    propagate to the awaiting caller.

    Usage:
        @atomic_async
        def rebind(self, ...):
            # Database operations
            ...

        await repository.rebind(...)
    """

    @functools.wraps(func)
    def _run_atomic(*args, **kwargs):
        with transaction.atomic():
            return func(*args, **kwargs)

    return sync_to_async(_run_atomic)

"""Optimistic local mutation with rollback."""

from __future__ import annotations

import copy
import logging
from typing import Awaitable, Callable, Generic, TypeVar

from promptstitch.persistence.errors import get_error_message
from promptstitch.persistence.models import GatewayResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OptimisticUpdate(Generic[T]):
    """Apply a change locally before the remote call confirms it.

    The state is snapshotted first. If the remote call returns a failed
    result or raises, the whole snapshot is restored.
    """

    def __init__(self, read: Callable[[], T], write: Callable[[T], None]):
        """Initialize the helper.

        Args:
            read: Returns the current local state.
            write: Replaces the local state.
        """
        self._read = read
        self._write = write

    async def run(
        self,
        apply: Callable[[T], T],
        remote: Callable[[], Awaitable[GatewayResult]],
        description: str = "optimistic update",
    ) -> GatewayResult:
        """Apply locally, call remote, roll back on failure.

        Args:
            apply: Computes the new local state from a copy of the current one.
            remote: Performs the remote mutation.
            description: Label used in log messages.

        Returns:
            The remote result, or a failed result if it raised.
        """
        snapshot = copy.deepcopy(self._read())
        self._write(apply(copy.deepcopy(snapshot)))

        try:
            result = await remote()
        except Exception as e:
            logger.error("%s failed: %s", description, e)
            result = GatewayResult.fail(get_error_message(e), code=getattr(e, "code", None))

        if not result.success:
            logger.warning("Rolling back %s: %s", description, result.error)
            self._write(snapshot)

        return result

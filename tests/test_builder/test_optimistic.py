"""Tests for the optimistic update helper."""

from __future__ import annotations

import asyncio

from promptstitch.builder.optimistic import OptimisticUpdate
from promptstitch.persistence.errors import PersistenceError
from promptstitch.persistence.models import GatewayResult


class Holder:
    """Mutable state for the helper to read and write."""

    def __init__(self, value):
        self.value = value

    def read(self):
        return self.value

    def write(self, value) -> None:
        self.value = value


class TestOptimisticUpdate:
    """Tests for OptimisticUpdate.run."""

    def test_keeps_change_on_success(self) -> None:
        """Test the new state stays after a successful remote call."""
        holder = Holder({"count": 1})
        update = OptimisticUpdate(holder.read, holder.write)

        async def remote() -> GatewayResult:
            assert holder.value == {"count": 2}
            return GatewayResult.ok()

        result = asyncio.run(update.run(lambda s: {**s, "count": 2}, remote))

        assert result.success
        assert holder.value == {"count": 2}

    def test_rolls_back_on_failed_result(self) -> None:
        """Test a failed result restores the snapshot."""
        holder = Holder(["a", "b"])
        update = OptimisticUpdate(holder.read, holder.write)

        async def remote() -> GatewayResult:
            return GatewayResult.fail("rejected")

        result = asyncio.run(update.run(lambda s: s + ["c"], remote))

        assert result.error == "rejected"
        assert holder.value == ["a", "b"]

    def test_rolls_back_on_exception(self) -> None:
        """Test an exception becomes a failed result with its code."""
        holder = Holder(["a"])
        update = OptimisticUpdate(holder.read, holder.write)

        async def remote() -> GatewayResult:
            raise PersistenceError("unavailable")

        result = asyncio.run(update.run(lambda s: [], remote))

        assert not result.success
        assert result.error_code == "unavailable"
        assert result.error == "The service is currently unavailable. Please try again later."
        assert holder.value == ["a"]

    def test_apply_gets_a_copy(self) -> None:
        """Test apply cannot corrupt the snapshot by mutating in place."""
        holder = Holder([1, 2])
        update = OptimisticUpdate(holder.read, holder.write)

        def apply(state):
            state.append(3)
            return state

        async def remote() -> GatewayResult:
            return GatewayResult.fail("no")

        asyncio.run(update.run(apply, remote))

        assert holder.value == [1, 2]

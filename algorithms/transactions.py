"""
Request/release transactions for the Banker's Algorithm Simulator.

Every change to the allocation ledger goes through TransactionManager.adjust,
which validates the change and, for requests, only commits it if the
resulting state is safe.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from models.resource_state import ResourceState
from algorithms.safety import SafetyEngine


class AdjustError(Enum):
    """Reasons an adjust call is rejected."""
    OUT_OF_RANGE = "out_of_range"
    EXCEEDS_CLAIM = "exceeds_claim"
    EXCEEDS_AVAILABLE = "exceeds_available"
    EXCEEDS_ALLOCATION = "exceeds_allocation"
    UNSAFE = "unsafe"


@dataclass(frozen=True)
class AdjustResult:
    """
    Outcome of a single adjust call.

    Attributes:
        process: Process index the call addressed
        resource: Resource index the call addressed
        delta: Signed unit count (positive = request, negative = release)
        error: Rejection reason, or None on success
        need: Need[i][j] before the call (None if out of range)
        available: Avail[j] before the call (None if out of range)
        allocated: Alloc[i][j] before the call (None if out of range)
        safe_sequence: Completion order that justified a granted request
    """
    process: int
    resource: int
    delta: int
    error: Optional[AdjustError] = None
    need: Optional[int] = None
    available: Optional[int] = None
    allocated: Optional[int] = None
    safe_sequence: List[int] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def granted(self) -> bool:
        return self.ok and self.delta > 0

    @property
    def released(self) -> bool:
        return self.ok and self.delta < 0

    @property
    def denied(self) -> bool:
        """True if the request was rolled back because it was unsafe."""
        return self.error is AdjustError.UNSAFE


class TransactionManager:
    """Applies signed deltas to one (process, resource) cell at a time."""

    def __init__(self, engine: Optional[SafetyEngine] = None):
        self.engine = engine or SafetyEngine()

    def adjust(self, state: ResourceState, process: int, resource: int, delta: int) -> AdjustResult:
        """
        Request (delta > 0) or release (delta < 0) units of one resource.

        Steps:
        1. Validate indices
        2. delta == 0: no change
        3. Request: delta <= need, delta <= available, tentatively allocate,
           run the safety algorithm, roll back if unsafe
        4. Release: delta <= allocated, apply directly (never re-checked,
           releasing only increases availability)

        Args:
            state: State to modify in place
            process: Process index i
            resource: Resource index j
            delta: Signed unit count

        Returns:
            AdjustResult describing the outcome; the state is unchanged
            whenever result.ok is False
        """
        if not state.in_range(process, resource):
            return AdjustResult(process, resource, delta, error=AdjustError.OUT_OF_RANGE)

        # Context reported back to the caller, observed before any change
        context = dict(
            need=state.need(process, resource),
            available=state.available_units(resource),
            allocated=state.allocated_units(process, resource)
        )

        if delta == 0:
            return AdjustResult(process, resource, delta, **context)

        if delta > 0:
            if delta > context['need']:
                return AdjustResult(process, resource, delta, error=AdjustError.EXCEEDS_CLAIM, **context)
            if delta > context['available']:
                return AdjustResult(process, resource, delta, error=AdjustError.EXCEEDS_AVAILABLE, **context)

            # Tentative grant; only the two touched cells need saving
            state._shift(process, resource, delta)

            check = self.engine.check(state)
            if not check.safe:
                state._restore_cell(process, resource, context['available'], context['allocated'])
                return AdjustResult(process, resource, delta, error=AdjustError.UNSAFE, **context)

            state.assert_resource_conservation(f"after granting r{resource}[{delta}] to p{process}")
            return AdjustResult(process, resource, delta, safe_sequence=check.sequence, **context)

        # Release path
        if -delta > context['allocated']:
            return AdjustResult(process, resource, delta, error=AdjustError.EXCEEDS_ALLOCATION, **context)

        state._shift(process, resource, delta)
        state.assert_resource_conservation(f"after p{process} released r{resource}[{-delta}]")
        return AdjustResult(process, resource, delta, **context)

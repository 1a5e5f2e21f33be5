"""
Core interface of the Banker's Algorithm Simulator.

The functions here are what the interactive session (simulator.py) and the
scenario loader call. They take already-parsed integers and never print.
"""

from typing import Sequence

from models.resource_state import ResourceState, StateSnapshot
from algorithms.safety import SafetyEngine, SafetyResult
from algorithms.transactions import AdjustResult, TransactionManager

_engine = SafetyEngine()
_transactions = TransactionManager(_engine)


def load_configuration(
    n: int,
    m: int,
    totals: Sequence[int],
    max_claims: Sequence[Sequence[int]],
    allocations: Sequence[Sequence[int]]
) -> ResourceState:
    """
    Build a new state from a claim graph, replacing any previous one.

    Raises:
        DimensionMismatch: If a vector/matrix shape disagrees with (n, m)
        InvalidAllocation: If the allocations violate the claims or totals
    """
    return ResourceState.create(n, m, totals, max_claims, allocations)


def request_units(state: ResourceState, process: int, resource: int, count: int) -> AdjustResult:
    """
    Request `count` additional units of a resource for a process.

    The request is granted only if the resulting state is safe.

    Raises:
        ValueError: If count is negative
    """
    if count < 0:
        raise ValueError(f"Request count must be non-negative, got {count}")
    return _transactions.adjust(state, process, resource, count)


def release_units(state: ResourceState, process: int, resource: int, count: int) -> AdjustResult:
    """
    Release `count` held units of a resource back to the pool.

    Raises:
        ValueError: If count is negative
    """
    if count < 0:
        raise ValueError(f"Release count must be non-negative, got {count}")
    return _transactions.adjust(state, process, resource, -count)


def compute_safe_sequence(state: ResourceState, trace: bool = False) -> SafetyResult:
    """Run the safety algorithm on the current state without changing it."""
    return _engine.check(state, trace=trace)


def snapshot(state: ResourceState) -> StateSnapshot:
    return state.snapshot()

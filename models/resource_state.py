"""
Resource State model for the Banker's Algorithm Simulator.

Holds the claim graph as a set of arrays:
- Resource vector  R[m]      total units of each resource type
- Available vector Avail[m]  units of each resource type not allocated
- Max claim matrix Max[n][m] maximum units process i may ever hold
- Allocation matrix Alloc[n][m] units process i currently holds
- Need matrix      Need[n][m] = Max - Alloc (derived, never stored)
"""

from dataclasses import dataclass
from numbers import Integral
from typing import List, Sequence

import numpy as np


class ConfigError(ValueError):
    """Raised when a claim graph configuration is rejected."""
    pass


class DimensionMismatch(ConfigError):
    """A supplied vector or matrix does not match (n, m)."""
    pass


class InvalidAllocation(ConfigError):
    """Allocations are negative, exceed a claim, or exceed a resource total."""
    pass


@dataclass(frozen=True)
class StateSnapshot:
    """
    Read-only view of a ResourceState for display.

    Attributes:
        totals: [R] Total units of each resource type
        available: [R] Unallocated units of each resource type
        max_claims: [P][R] Maximum claim of each process
        allocations: [P][R] Current allocation of each process
        need: [P][R] Max - Allocation
    """
    totals: List[int]
    available: List[int]
    max_claims: List[List[int]]
    allocations: List[List[int]]
    need: List[List[int]]


def _check_length(name: str, values: Sequence, expected: int) -> None:
    if len(values) != expected:
        raise DimensionMismatch(
            f"{name} has length {len(values)}, expected {expected}"
        )


def _check_matrix(name: str, rows: Sequence[Sequence[int]], n: int, m: int) -> None:
    _check_length(name, rows, n)
    for i, row in enumerate(rows):
        _check_length(f"{name} row p{i}", row, m)


def _check_whole_numbers(name: str, values: Sequence) -> None:
    # bool is an Integral subclass but never a unit count
    for k, value in enumerate(values):
        if isinstance(value, bool) or not isinstance(value, Integral):
            raise InvalidAllocation(f"{name}[{k}] must be a whole number, got {value!r}")


class ResourceState:
    """
    Authoritative allocation ledger for n processes and m resource types.

    Instances are built with create(); allocation data is only ever changed
    through algorithms.transactions.TransactionManager, which validates
    every change with the safety algorithm before committing it.
    """

    def __init__(
        self,
        totals: np.ndarray,
        max_claim: np.ndarray,
        allocation: np.ndarray
    ):
        self._totals = totals
        self._max_claim = max_claim
        self._allocation = allocation
        self._available = np.zeros(len(totals), dtype=int)
        self._recompute_available()

    @classmethod
    def create(
        cls,
        n: int,
        m: int,
        totals: Sequence[int],
        max_claims: Sequence[Sequence[int]],
        allocations: Sequence[Sequence[int]]
    ) -> "ResourceState":
        """
        Build a validated state from a claim graph.

        Args:
            n: Number of processes
            m: Number of resource types
            totals: [R] Total units of each resource type
            max_claims: [P][R] Maximum units each process may claim
            allocations: [P][R] Units currently allocated to each process

        Returns:
            New ResourceState with Available derived from the allocations

        Raises:
            DimensionMismatch: If n/m are negative or a length disagrees with them
            InvalidAllocation: If a value is not a whole number or is negative,
                an allocation exceeds its claim, or a column of allocations
                exceeds the resource total
        """
        if n < 0 or m < 0:
            raise DimensionMismatch(f"Dimensions must be non-negative (n={n}, m={m})")

        _check_length("totals", totals, m)
        _check_matrix("max_claims", max_claims, n, m)
        _check_matrix("allocations", allocations, n, m)
        _check_whole_numbers("totals", totals)
        for i in range(n):
            _check_whole_numbers(f"max_claims row p{i}", max_claims[i])
            _check_whole_numbers(f"allocations row p{i}", allocations[i])

        # reshape keeps (n, 0) and (0, m) shapes intact for empty inputs
        r = np.array(totals, dtype=int).reshape(m)
        max_claim = np.array(max_claims, dtype=int).reshape(n, m)
        allocation = np.array(allocations, dtype=int).reshape(n, m)

        if np.any(r < 0):
            raise InvalidAllocation(f"Resource totals must be non-negative: {list(r)}")
        if np.any(max_claim < 0):
            raise InvalidAllocation("Max claims must be non-negative")
        if np.any(allocation < 0):
            raise InvalidAllocation("Allocations must be non-negative")

        # Alloc[i][j] <= Max[i][j]
        over_claim = np.argwhere(allocation > max_claim)
        if len(over_claim):
            i, j = over_claim[0]
            raise InvalidAllocation(
                f"Allocation of r{j} to p{i} ({allocation[i][j]}) "
                f"exceeds its max claim ({max_claim[i][j]})"
            )

        # sum(Alloc[:, j]) <= R[j]
        allocated = allocation.sum(axis=0)
        for j in range(m):
            if allocated[j] > r[j]:
                raise InvalidAllocation(
                    f"Allocations of r{j} ({allocated[j]}) exceed total units ({r[j]})"
                )

        return cls(r, max_claim, allocation)

    @property
    def num_processes(self) -> int:
        """Number of processes (n)."""
        return self._max_claim.shape[0]

    @property
    def num_resources(self) -> int:
        """Number of resource types (m)."""
        return len(self._totals)

    @property
    def totals(self) -> np.ndarray:
        return self._totals.copy()

    @property
    def available(self) -> np.ndarray:
        return self._available.copy()

    @property
    def max_claim(self) -> np.ndarray:
        return self._max_claim.copy()

    @property
    def allocation(self) -> np.ndarray:
        return self._allocation.copy()

    @property
    def need_matrix(self) -> np.ndarray:
        """
        Get need matrix [P][R].
        Computed as: Need = Max - Allocation
        """
        return self._max_claim - self._allocation

    def need(self, process: int, resource: int) -> int:
        """
        Remaining units of a resource a process may still request.

        Raises:
            IndexError: If process or resource is out of range
        """
        self._check_index(process, resource)
        return int(self._max_claim[process][resource] - self._allocation[process][resource])

    def available_units(self, resource: int) -> int:
        if not 0 <= resource < self.num_resources:
            raise IndexError(f"Resource index {resource} out of range (m={self.num_resources})")
        return int(self._available[resource])

    def allocated_units(self, process: int, resource: int) -> int:
        self._check_index(process, resource)
        return int(self._allocation[process][resource])

    def in_range(self, process: int, resource: int) -> bool:
        """True if (process, resource) addresses a cell of the ledger."""
        return 0 <= process < self.num_processes and 0 <= resource < self.num_resources

    def _check_index(self, process: int, resource: int) -> None:
        # numpy would wrap negative indices, so check explicitly
        if not 0 <= process < self.num_processes:
            raise IndexError(f"Process index {process} out of range (n={self.num_processes})")
        if not 0 <= resource < self.num_resources:
            raise IndexError(f"Resource index {resource} out of range (m={self.num_resources})")

    def _recompute_available(self) -> None:
        """Avail[j] = R[j] - sum(Alloc[:, j])"""
        self._available = self._totals - self._allocation.sum(axis=0)

    def _shift(self, process: int, resource: int, delta: int) -> None:
        """
        Move delta units of a resource from Available to a process
        (negative delta moves them back). Performs no validation.
        """
        self._available[resource] -= delta
        self._allocation[process][resource] += delta

    def _restore_cell(self, process: int, resource: int, available: int, allocated: int) -> None:
        """Restore one (Avail[j], Alloc[i][j]) pair verbatim."""
        self._available[resource] = available
        self._allocation[process][resource] = allocated

    def snapshot(self) -> StateSnapshot:
        """
        Create a read-only snapshot of the current state.

        Returns:
            StateSnapshot with plain-list copies of every array
        """
        return StateSnapshot(
            totals=self._totals.tolist(),
            available=self._available.tolist(),
            max_claims=self._max_claim.tolist(),
            allocations=self._allocation.tolist(),
            need=self.need_matrix.tolist()
        )

    def assert_resource_conservation(self, context: str = "") -> None:
        """Verify resource conservation: allocated + available = total for all resources.

        Args:
            context: Description of when this check is being run (for error messages)

        Raises:
            AssertionError: If resource conservation is violated
        """
        allocated = self._allocation.sum(axis=0)

        for j in range(self.num_resources):
            # Check conservation: allocated + available = total
            assert allocated[j] + self._available[j] == self._totals[j], (
                f"Resource conservation violated for r{j} {context}\n"
                f"  Allocated: {allocated[j]}, Available: {self._available[j]}, "
                f"Total: {self._totals[j]}"
            )

            # Check non-negative available
            assert self._available[j] >= 0, (
                f"Negative available resources for r{j} {context}\n"
                f"  Available: {self._available[j]}"
            )

        assert np.all(self._allocation <= self._max_claim), (
            f"Allocation exceeds max claim {context}"
        )

    def __repr__(self) -> str:
        return (
            f"ResourceState(n={self.num_processes}, m={self.num_resources}, "
            f"available={self._available.tolist()})"
        )

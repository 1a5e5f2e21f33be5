"""
Safety Algorithm (Banker's Algorithm) for the Simulator.

Decides whether a resource state is safe, i.e. whether some completion order
lets every process obtain its full claim without deadlock.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from models.resource_state import ResourceState


@dataclass(frozen=True)
class SafetyStep:
    """
    One comparison made by the safety algorithm.

    Attributes:
        process: Index of the process examined
        need: Need[i] row at the time of the comparison
        work: Work vector at the time of the comparison
        eligible: True if Need[i] <= Work, i.e. the process can be sequenced
    """
    process: int
    need: Tuple[int, ...]
    work: Tuple[int, ...]
    eligible: bool


@dataclass(frozen=True)
class SafetyResult:
    """
    Outcome of a safety check.

    `sequence` is a valid completion order only when `safe` is True;
    otherwise it is the partial order found before the scan stalled.
    """
    safe: bool
    sequence: List[int] = field(default_factory=list)
    steps: List[SafetyStep] = field(default_factory=list)


class SafetyEngine:
    """Runs the safety algorithm against a borrowed ResourceState."""

    def check(self, state: ResourceState, trace: bool = False) -> SafetyResult:
        """
        Check if a state is safe using Banker's safety algorithm.

        Algorithm:
        1. Initialize Work = Available, Finish = [False] * n
        2. Scan unfinished processes in increasing index order
        3. If Need[i] <= Work: Finish[i] = True, Work += Allocation[i],
           append i to the sequence and keep scanning the same pass
        4. Stop after a pass that finishes nobody (at most n passes)
        5. Safe iff every process finished

        Time Complexity: O(P²×R)

        Args:
            state: State to evaluate (never modified)
            trace: Record every Need <= Work comparison in the result

        Returns:
            SafetyResult with the safe flag, sequence and optional steps
        """
        n = state.num_processes
        work = state.available
        need = state.need_matrix
        allocation = state.allocation

        finish = np.zeros(n, dtype=bool)
        sequence: List[int] = []
        steps: List[SafetyStep] = []

        for _ in range(n):
            progressed = False

            for i in range(n):
                if finish[i]:
                    continue

                eligible = bool(np.all(need[i] <= work))
                if trace:
                    steps.append(SafetyStep(
                        process=i,
                        need=tuple(need[i].tolist()),
                        work=tuple(work.tolist()),
                        eligible=eligible
                    ))

                if eligible:
                    # Process can finish: add its allocation back to work
                    work += allocation[i]
                    finish[i] = True
                    sequence.append(i)
                    progressed = True

            if not progressed:
                break

        return SafetyResult(safe=bool(finish.all()), sequence=sequence, steps=steps)

    def is_safe(self, state: ResourceState) -> bool:
        return self.check(state).safe

    def safe_sequence(self, state: ResourceState) -> Optional[List[int]]:
        """Return the safe completion order, or None if the state is unsafe."""
        result = self.check(state)
        if result.safe:
            return result.sequence
        return None

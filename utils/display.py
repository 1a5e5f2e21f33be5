"""
Text rendering for the Banker's Algorithm Simulator.

Turns snapshots, safety traces and adjust results into the tables and
messages shown by the interactive session.
"""

from typing import List, Sequence

from models.resource_state import StateSnapshot
from algorithms.safety import SafetyStep
from algorithms.transactions import AdjustError, AdjustResult


def format_vector(title: str, values: Sequence[int]) -> str:
    """
    Render a resource vector with an r0..rN header.

    Args:
        title: Heading printed above the vector
        values: One entry per resource type

    Returns:
        Multi-line string
    """
    header = "\t" + "\t".join(f"r{j}" for j in range(len(values)))
    row = "\t" + "\t".join(str(v) for v in values)
    return f"\n{title}\n{header}\n{row}"


def format_matrix(title: str, rows: Sequence[Sequence[int]], num_resources: int) -> str:
    """Render a process x resource matrix with p/r headers."""
    output = [f"\n{title}"]
    output.append("\t" + "\t".join(f"r{j}" for j in range(num_resources)))
    for i, row in enumerate(rows):
        output.append(f"p{i}\t" + "\t".join(str(v) for v in row))
    return "\n".join(output)


def format_state(snapshot: StateSnapshot) -> str:
    """
    Generate readable string representation of a state snapshot.

    Returns:
        Formatted string showing all vectors and matrices
    """
    m = len(snapshot.totals)
    return "\n".join([
        format_vector("Resources:", snapshot.totals),
        format_vector("Available:", snapshot.available),
        format_matrix("Max Claim:", snapshot.max_claims, m),
        format_matrix("Allocated:", snapshot.allocations, m),
        format_matrix("Need:", snapshot.need, m),
    ])


def format_changes(snapshot: StateSnapshot) -> str:
    """Tables that change after a request or release."""
    m = len(snapshot.totals)
    return "\n".join([
        format_vector("Available:", snapshot.available),
        format_matrix("Allocated:", snapshot.allocations, m),
        format_matrix("Need:", snapshot.need, m),
    ])


def format_safety_steps(steps: List[SafetyStep]) -> str:
    """
    Render each comparison of the safety algorithm.

    Format: "Comparing: < 1 2 2 > <= < 3 3 2 > : Process p1 can be sequenced"
    """
    lines = []
    for step in steps:
        need = " ".join(str(v) for v in step.need)
        work = " ".join(str(v) for v in step.work)
        verdict = "can" if step.eligible else "cannot"
        lines.append(f"Comparing: < {need} > <= < {work} > : Process p{step.process} {verdict} be sequenced")
    return "\n".join(lines)


def describe_result(result: AdjustResult) -> str:
    """
    Reason string for an adjust outcome.

    Args:
        result: Outcome returned by TransactionManager.adjust

    Returns:
        Short human-readable explanation
    """
    amount = abs(result.delta)

    if result.error is AdjustError.OUT_OF_RANGE:
        return f"Invalid process/resource (p{result.process}, r{result.resource})"
    elif result.error is AdjustError.EXCEEDS_CLAIM:
        return f"Request exceeds need (requested: {amount}, need: {result.need})"
    elif result.error is AdjustError.EXCEEDS_AVAILABLE:
        return f"Request exceeds available units (requested: {amount}, available: {result.available})"
    elif result.error is AdjustError.EXCEEDS_ALLOCATION:
        return f"Cannot release more than allocated (releasing: {amount}, allocated: {result.allocated})"
    elif result.error is AdjustError.UNSAFE:
        return "Request would lead to UNSAFE state"
    elif result.delta == 0:
        return "No change"
    elif result.granted:
        sequence = " ".join(f"p{pid}" for pid in result.safe_sequence)
        return f"Safe state maintained, sequence: {sequence}"
    else:
        return "Units returned to available pool"

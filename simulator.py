#!/usr/bin/env python3
"""
Banker's Algorithm Simulator
Main entry point: an interactive menu session over a claim graph.

Educational tool for demonstrating deadlock avoidance.
"""

import argparse
import sys
from typing import Callable, List, Optional

from models.resource_state import ConfigError, ResourceState
from banker import (
    compute_safe_sequence,
    load_configuration,
    release_units,
    request_units,
    snapshot,
)
from utils.display import describe_result, format_changes, format_safety_steps, format_state
from utils.logger import SessionLogger
from utils.scenario_loader import ScenarioLoadError, get_scenario_description, load_scenario

MENU = """
Banker's Algorithm
------------------
1) Enter claim graph
2) Request resource
3) Release resource
4) Determine safe sequence
5) Quit program
"""

NO_CLAIM_GRAPH = "Please enter a claim graph first."


def parse_index(token: str, prefix: str) -> int:
    """
    Parse a console token such as "p2" or "R1" into an index.

    Args:
        token: Raw token typed by the user
        prefix: Expected letter ("p" for processes, "r" for resources)

    Returns:
        The integer following the prefix

    Raises:
        ValueError: If the token does not have the form <prefix><digits>
    """
    token = token.strip()
    if len(token) < 2 or token[0].lower() != prefix.lower() or not token[1:].isdigit():
        raise ValueError(f"Expected {prefix}<number>, got '{token}'")
    return int(token[1:])


def parse_ints(line: str) -> List[int]:
    """Parse a whitespace-separated line of integers."""
    try:
        return [int(tok) for tok in line.split()]
    except ValueError:
        raise ValueError(f"Expected whole numbers, got '{line.strip()}'")


def resource_span(m: int) -> str:
    """Label for the valid resource columns, e.g. "r0..r2"."""
    if m <= 0:
        return "no resources"
    if m == 1:
        return "r0"
    return f"r0..r{m - 1}"


class BankerSession:
    """
    Interactive session holding the current claim graph.

    The session owns its ResourceState exclusively; entering a new claim
    graph replaces it wholesale.
    """

    def __init__(self, logger: SessionLogger, input_fn: Optional[Callable[[str], str]] = None):
        self.logger = logger
        self.input_fn = input_fn or input
        self.state: Optional[ResourceState] = None

    def _read_int(self, prompt: str) -> int:
        values = parse_ints(self.input_fn(prompt))
        if len(values) != 1:
            raise ValueError(f"Expected a single number, got {len(values)}")
        return values[0]

    def enter_claim_graph(self) -> None:
        """Prompt for a complete claim graph and replace the current state."""
        m = self._read_int("Enter number of resources: ")
        span = resource_span(m)
        totals = parse_ints(self.input_fn(f"Enter number of units for resources ({span}): "))
        n = self._read_int("Enter number of processes: ")

        max_claims = []
        for i in range(n):
            max_claims.append(parse_ints(self.input_fn(f"Enter maximum units p{i} will claim ({span}): ")))

        allocations = []
        for i in range(n):
            allocations.append(parse_ints(self.input_fn(f"Enter currently allocated to p{i} ({span}): ")))

        self.state = load_configuration(n, m, totals, max_claims, allocations)
        self.logger.log(format_state(snapshot(self.state)))

    def request_flow(self) -> None:
        """Prompt for a request and run it through the safety check."""
        if self.state is None:
            self.logger.log(NO_CLAIM_GRAPH)
            return

        pid = parse_index(self.input_fn("Enter requesting process: "), "p")
        rid = parse_index(self.input_fn("Enter requested resource: "), "r")
        units = self._read_int(f"Enter number of units process p{pid} is requesting from resource r{rid}: ")

        result = request_units(self.state, pid, rid, units)
        self.logger.log_adjust(pid, rid, units, "requests", result.ok, describe_result(result))
        if result.ok:
            self.logger.log(format_changes(snapshot(self.state)))

    def release_flow(self) -> None:
        """Prompt for a release and return the units to the pool."""
        if self.state is None:
            self.logger.log(NO_CLAIM_GRAPH)
            return

        pid = parse_index(self.input_fn("Enter releasing process: "), "p")
        rid = parse_index(self.input_fn("Enter released resource: "), "r")
        units = self._read_int(f"Enter number of units process p{pid} is releasing from resource r{rid}: ")

        result = release_units(self.state, pid, rid, units)
        self.logger.log_adjust(pid, rid, units, "releases", result.ok, describe_result(result))
        if result.ok:
            self.logger.log(format_changes(snapshot(self.state)))

    def safe_sequence_flow(self) -> None:
        """Run the safety algorithm and show every comparison it made."""
        if self.state is None:
            self.logger.log(NO_CLAIM_GRAPH)
            return

        result = compute_safe_sequence(self.state, trace=True)
        if result.steps:
            self.logger.log(format_safety_steps(result.steps))
        self.logger.log_safe_sequence(result.safe, result.sequence)

    def run(self) -> None:
        """
        Menu loop. Returns when the user quits or input is exhausted.

        Errors from a single action (bad tokens, invalid claim graphs) are
        logged and the loop continues with the state unchanged.
        """
        actions = {
            1: self.enter_claim_graph,
            2: self.request_flow,
            3: self.release_flow,
            4: self.safe_sequence_flow,
        }

        while True:
            self.logger.log(MENU)
            try:
                line = self.input_fn("Enter selection: ")
            except EOFError:
                self.logger.log("\nQuitting program...")
                return

            try:
                choice = int(line.strip())
            except ValueError:
                choice = None

            if choice == 5:
                self.logger.log("Quitting program...")
                return

            action = actions.get(choice)
            if action is None:
                self.logger.log("Invalid selection.")
                continue

            try:
                action()
            except EOFError:
                self.logger.log("\nQuitting program...")
                return
            except ConfigError as e:
                self.logger.log(f"Invalid claim graph: {e}", "error")
            except ValueError as e:
                self.logger.log(f"Invalid input: {e}", "error")

            if self.state is not None:
                self.logger.log_system_state(format_state(snapshot(self.state)))


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the simulator."""
    parser = argparse.ArgumentParser(
        description="Banker's Algorithm Deadlock-Avoidance Simulator"
    )
    parser.add_argument(
        '--scenario',
        type=str,
        default=None,
        help='Path to a scenario JSON file to preload as the claim graph'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging (state tables after every action)'
    )
    parser.add_argument(
        '--log-file',
        type=str,
        default=None,
        help='Mirror session output to this file'
    )

    args = parser.parse_args(argv)

    with SessionLogger(verbose=args.verbose, log_file=args.log_file) as logger:
        session = BankerSession(logger)

        if args.scenario:
            try:
                session.state = load_scenario(args.scenario)
            except (ScenarioLoadError, ConfigError) as e:
                logger.log(f"Failed to load scenario: {e}", "error")
                return 1

            description = get_scenario_description(args.scenario)
            if description:
                logger.log(f"Scenario: {description}")
            logger.log(format_state(snapshot(session.state)))

        session.run()
    return 0


if __name__ == '__main__':
    sys.exit(main())

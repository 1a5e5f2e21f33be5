"""
Logger utility for the Banker's Algorithm Simulator.

Session output goes to the console and, optionally, to a log file. Use the
logger as a context manager so the file is closed when the session ends:

    with SessionLogger(verbose=True, log_file="session.log") as logger:
        logger.log("Claim graph loaded")
"""

from datetime import datetime
from typing import List, Optional

# Prefix per level; info lines are printed bare
LEVEL_PREFIXES = {
    "error": "[ERROR] ",
    "warning": "[WARNING] ",
    "debug": "[DEBUG] ",
}


class SessionLogger:
    """
    Console and log-file output for one interactive session.

    Decisions are written as
    "p1 requests r0[1] - GRANTED (Safe state maintained, sequence: p1 p3 p4 p0 p2)".
    """

    def __init__(self, verbose: bool = False, log_file: Optional[str] = None):
        """
        Args:
            verbose: Also print debug lines (state tables after every action)
            log_file: Optional path that receives a copy of every line
        """
        self.verbose = verbose
        self.log_file = log_file
        self.file_handle = None

        if log_file:
            self.file_handle = open(log_file, 'w', encoding='utf-8')
            started = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            self._write_file(f"Banker's Algorithm Session Log - {started}\n{'=' * 60}\n")

    def __enter__(self) -> "SessionLogger":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self.file_handle is None

    def log(self, message: str, level: str = "info") -> None:
        """Print a message and mirror it to the log file; debug needs verbose."""
        if level == "debug" and not self.verbose:
            return

        line = LEVEL_PREFIXES.get(level, "") + message
        print(line)
        self._write_file(line)

    def _write_file(self, line: str) -> None:
        if self.file_handle is not None:
            self.file_handle.write(line + "\n")
            self.file_handle.flush()

    def log_adjust(self, pid: int, resource_type: int, amount: int,
                   action: str, ok: bool, reason: str) -> None:
        """
        Log a request or release decision.

        Args:
            pid: Process index
            resource_type: Resource type index
            amount: Units requested or released
            action: "requests" or "releases"
            ok: Whether the change was applied
            reason: Text from describe_result
        """
        outcomes = ("RELEASED", "REJECTED") if action == "releases" else ("GRANTED", "DENIED")
        status = outcomes[0] if ok else outcomes[1]
        self.log(
            f"p{pid} {action} r{resource_type}[{amount}] - {status} ({reason})",
            "info" if ok else "warning",
        )

    def log_safe_sequence(self, safe: bool, sequence: List[int]) -> None:
        """Log a safety check outcome; an unsafe state lists what could finish."""
        if safe:
            self.log("Safe sequence of processes: " + " ".join(f"p{pid}" for pid in sequence))
            return

        finished = ", ".join(f"p{pid}" for pid in sequence) or "none"
        self.log(f"State is UNSAFE - no safe sequence exists (could finish: {finished})", "warning")

    def log_system_state(self, state_str: str) -> None:
        self.log(f"System State:\n{state_str}", "debug")

    def close(self) -> None:
        """Close the log file. Safe to call more than once."""
        if self.file_handle is not None:
            self.file_handle.close()
            self.file_handle = None

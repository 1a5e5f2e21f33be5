"""
Scenario Loader for the Banker's Algorithm Simulator.

Loads a claim graph from a JSON scenario file:

    {
        "description": "optional text",
        "resources": [{"type_id": 0, "total_instances": 10}, ...],
        "processes": [
            {"pid": 0, "max_demand": [7, 5, 3], "initial_allocation": [0, 1, 0]},
            ...
        ]
    }

Processes and resources are indexed by pid / type_id, which must run 0..n-1
and 0..m-1.
"""

import json
from typing import Any, Dict, List, Tuple

from models.resource_state import ResourceState
from banker import load_configuration


class ScenarioLoadError(Exception):
    """Exception raised when scenario file cannot be loaded or is invalid."""
    pass


def load_scenario(file_path: str) -> ResourceState:
    """
    Load scenario from JSON file.

    Args:
        file_path: Path to scenario JSON file

    Returns:
        ResourceState built from the scenario's claim graph

    Raises:
        ScenarioLoadError: If file cannot be loaded or is malformed
        ConfigError: If the claim graph itself is invalid
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ScenarioLoadError(f"Scenario file not found: {file_path}")
    except json.JSONDecodeError as e:
        raise ScenarioLoadError(f"Invalid JSON in scenario file: {e}")
    except UnicodeDecodeError as e:
        raise ScenarioLoadError(f"Scenario file is not UTF-8 text: {e}")
    except OSError as e:
        # directories, permissions
        raise ScenarioLoadError(f"Cannot read scenario file {file_path}: {e}")

    return build_state(data)


def build_state(data: Dict[str, Any]) -> ResourceState:
    """
    Build a ResourceState from already-parsed scenario data.

    Raises:
        ScenarioLoadError: If required fields are missing, mistyped or mis-numbered
        ConfigError: If the claim graph itself is invalid
    """
    if not isinstance(data, dict):
        raise ScenarioLoadError("Scenario must be a JSON object")

    # Validate required fields
    if 'processes' not in data:
        raise ScenarioLoadError("Scenario missing 'processes' field")
    if 'resources' not in data:
        raise ScenarioLoadError("Scenario missing 'resources' field")

    totals = _load_resources(_require_list("resources", data['resources']))
    num_resources = len(totals)

    max_claims, allocations = _load_processes(
        _require_list("processes", data['processes']), num_resources
    )

    return load_configuration(len(max_claims), num_resources, totals, max_claims, allocations)


def _load_resources(resource_data: List[Dict]) -> List[int]:
    """
    Load resource definitions from scenario data.

    Args:
        resource_data: List of resource dictionaries

    Returns:
        Total instances ordered by type_id
    """
    resources = []

    for res in resource_data:
        if not isinstance(res, dict):
            raise ScenarioLoadError(f"Resource entry must be an object, got {res!r}")
        if 'type_id' not in res:
            raise ScenarioLoadError("Resource missing 'type_id' field")
        if 'total_instances' not in res:
            raise ScenarioLoadError(f"Resource {res['type_id']} missing 'total_instances'")
        type_id = _require_int("Resource type_id", res['type_id'])
        total = _require_int(f"Resource {type_id} total_instances", res['total_instances'])
        resources.append((type_id, total))

    resources.sort(key=lambda r: r[0])
    _check_numbering("Resource type_id", [type_id for type_id, _ in resources])

    return [total for _, total in resources]


def _load_processes(proc_data: List[Dict], num_resources: int) -> Tuple[List[List[int]], List[List[int]]]:
    """
    Load max claims and initial allocations, ordered by pid.

    Args:
        proc_data: List of process dictionaries
        num_resources: Number of resource types in system

    Returns:
        Tuple of (max_claims, allocations)
    """
    processes = []

    for proc in proc_data:
        if not isinstance(proc, dict):
            raise ScenarioLoadError(f"Process entry must be an object, got {proc!r}")
        for field in ['pid', 'max_demand']:
            if field not in proc:
                raise ScenarioLoadError(f"Process missing required field: {field}")

        pid = _require_int("Process pid", proc['pid'])
        max_demand = _require_int_list(f"Process {pid} max_demand", proc['max_demand'])
        # Initial allocation defaults to all zeros
        allocation = _require_int_list(
            f"Process {pid} initial_allocation",
            proc.get('initial_allocation', [0] * num_resources)
        )
        processes.append((pid, max_demand, allocation))

    processes.sort(key=lambda p: p[0])
    _check_numbering("Process pid", [pid for pid, _, _ in processes])

    max_claims = [max_demand for _, max_demand, _ in processes]
    allocations = [allocation for _, _, allocation in processes]
    return max_claims, allocations


def _require_list(name: str, value: Any) -> List:
    if not isinstance(value, list):
        raise ScenarioLoadError(f"'{name}' must be a list, got {value!r}")
    return value


def _require_int(name: str, value: Any) -> int:
    # JSON true/false load as bool, which is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        raise ScenarioLoadError(f"{name} must be a whole number, got {value!r}")
    return value


def _require_int_list(name: str, value: Any) -> List[int]:
    values = _require_list(name, value)
    return [_require_int(f"{name}[{k}]", v) for k, v in enumerate(values)]


def _check_numbering(name: str, ids: List[int]) -> None:
    """Ids must be exactly 0..len-1 so they can serve as matrix indices."""
    if ids != list(range(len(ids))):
        raise ScenarioLoadError(f"{name}s must be numbered 0..{len(ids) - 1}, got {ids}")


def get_scenario_description(file_path: str) -> str:
    """
    Get description from scenario file without full loading.

    Args:
        file_path: Path to scenario JSON file

    Returns:
        Description string, or empty string if not present or unreadable
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return ''
    if not isinstance(data, dict):
        return ''
    description = data.get('description', '')
    return description if isinstance(description, str) else ''

"""
Utilities for the Banker's Algorithm Simulator: logging, scenario loading
and text rendering.
"""

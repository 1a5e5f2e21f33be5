"""
Algorithms package for the Banker's Algorithm Simulator.
Contains the safety algorithm and the request/release transaction logic.
"""

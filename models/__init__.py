"""
Models package for the Banker's Algorithm Simulator.
Contains the resource state (claim graph) model.
"""

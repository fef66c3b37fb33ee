"""
Example scripts for the orrery simulation.
"""

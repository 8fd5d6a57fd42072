"""
Command-line interface for Agent Cost Simulator.
"""

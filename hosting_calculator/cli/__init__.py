"""
Command-line interface for the hosting cost calculator.
"""

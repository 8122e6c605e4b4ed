"""
Configuration loading for usage scenarios.
"""

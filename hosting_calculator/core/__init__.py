"""
Core modules for the hosting cost calculator.

This package contains the shared result types, the metered billing
helpers, provider configuration and the session controller.
"""

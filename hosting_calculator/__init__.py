"""
Hosting Cost Calculator.

Usage-based monthly cost estimates for cloud hosting providers.
"""

__version__ = "0.1.0"

"""
Utility modules for the property feed sync package.

Submodules:
    reporting: rich rendering of sync results.
"""

from .reporting import build_report, print_report

"""
Finance Tracker - Source Package

A small personal-finance web application: users register, log in,
record income and expenses, and view monthly totals and category
breakdowns.

DESIGN PRINCIPLES:
1. Sessions carry an identity claim only, never credentials
2. Storage and session backends are swappable behind interfaces
3. Every significant action leaves one structured log line
4. Failures surface immediately; nothing is retried per request
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"

"""Services module.

This module provides the service layer architecture:
- exceptions: Custom service exceptions
- requests: Request ledger and period index services
"""

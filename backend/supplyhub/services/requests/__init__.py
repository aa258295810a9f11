"""Request ledger services.

- ledger_service: submit, retract and fetch daily requests
- period_service: per-day activity over a date range
"""

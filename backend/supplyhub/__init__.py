"""Supply hub request ledger backend."""

"""Customer balance and bottle reconciliation for water deliveries."""

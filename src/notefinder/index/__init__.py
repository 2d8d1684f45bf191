"""Note index storage, reconciliation and search."""

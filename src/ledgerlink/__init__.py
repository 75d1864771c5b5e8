"""Import, reconcile and merge personal finance ledgers."""

"""Background jobs (expired role sweep)."""

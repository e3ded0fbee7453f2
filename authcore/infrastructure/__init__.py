"""Infrastructure: persistence, security, and background jobs."""

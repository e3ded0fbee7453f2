"""Persistence: database session management, ORM models, repositories."""

"""Application layer: DTOs, repository protocols, and services."""

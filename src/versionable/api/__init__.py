"""Read-only HTTP API over snapshot history (FastAPI)."""

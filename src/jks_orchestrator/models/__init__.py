"""Data models shared across the orchestrator."""

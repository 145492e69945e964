"""Keystore orchestration services."""

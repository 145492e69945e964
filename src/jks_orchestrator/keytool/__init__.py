"""keytool command construction and output parsing (no I/O)."""

"""Domain types and pure rules (no I/O)."""

"""Process-level I/O setup (logging)."""

"""Domain model for objfs: paths, node records, and blocks."""

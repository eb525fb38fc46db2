"""Abstract ports objfs depends on."""

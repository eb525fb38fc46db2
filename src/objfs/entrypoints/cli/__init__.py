"""The ``objfs`` command-line tool."""

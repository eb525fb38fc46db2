"""Entrypoints (inbound adapters) for objfs.

Currently only the ``objfs`` command-line tool. Entrypoints parse input,
obtain a store through `objfs.bootstrap`, and present results.
"""

"""buildscope CLI — Typer-based command-line interface.

Provides the ``buildscope`` command with subcommands for showing a
build's task timeline (once or live), printing its summary as JSON,
showing recent build history, and launching the dashboard.

All human-facing output uses Rich for formatted terminal display.
"""

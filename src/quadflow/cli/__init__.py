"""Command-line entrypoint, composition root and slash-command registry."""

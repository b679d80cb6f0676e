"""Bundled commands, loaded by the console entry point."""

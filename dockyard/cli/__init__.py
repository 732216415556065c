"""Typer command line interface for Dockyard."""

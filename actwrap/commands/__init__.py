"""Command handlers for the actwrap CLI."""

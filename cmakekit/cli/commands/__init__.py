"""Command implementations for the cmakekit CLI."""

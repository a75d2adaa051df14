"""
TUI (Terminal User Interface) for quote-slides using Textual.

This package provides the single slide view: the navigator and slide builder
carry all the logic, the Textual app only lays out widgets and maps keys to
navigation actions.
"""

__version__ = "1.0.0"

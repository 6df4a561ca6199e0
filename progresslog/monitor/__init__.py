"""Progresslog monitor — read-only views over a parsed status tree.

Modules
-------
terminal
    ``TerminalCapabilities`` protocol and its Rich-backed implementation,
    ``RichTerminal``, plus ``ResizeWatcher`` for polled resize detection.
renderer
    ``TTYRenderer`` draws progress bars and repaints only changed rows.
table
    ``StatusTableRenderer`` turns a snapshot into a Rich panel for one-shot
    display.
"""

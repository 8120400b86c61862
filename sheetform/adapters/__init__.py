"""Adapter package for external I/O implementations.

Purpose:
    Concrete implementations of domain ports: the ``requests``-based data
    service adapter, its in-memory double, and JSON settings storage.

Call context:
    Imported by ``sheetform.app.controller`` for runtime wiring and by tests
    for offline end-to-end runs and transport-level behavior checks.
"""

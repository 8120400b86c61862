"""ViewModel package for UI state and command surfaces.

Call context:
    ``sheetform.app.controller`` builds ``FormVM`` over the orchestrated store;
    ``sheetform.app.main`` fills ``SettingsVM`` from storage, env and flags.

Dependencies:
    Domain types and the store only. Transport and persistence stay outside.
"""

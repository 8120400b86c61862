"""Use-case layer driving the form.

Modules coordinate domain actions and ports without performing transport I/O
directly: the store holds state, the orchestrator runs the transition table,
and the request runner executes request effects through ``FormDataPort``.
"""

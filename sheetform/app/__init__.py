"""Application composition layer.

``controller`` wires adapters, the orchestrated store and view-models from
settings; ``main`` is the command line host built on top of it.
"""

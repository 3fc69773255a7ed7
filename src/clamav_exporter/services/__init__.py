"""Service layer: collection passes and one-shot probes.

Services may import from domain and infrastructure layers.
They must never import from commands or output.
"""

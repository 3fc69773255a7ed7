"""Infrastructure layer: the clamd socket client.

This layer depends on stdlib sockets and the domain command tokens.
It must never import from services, commands, or output.
"""

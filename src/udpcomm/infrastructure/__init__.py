"""Infrastructure layer — the datagram transport.

This layer depends on stdlib sockets and the domain error/enum types.
It must never import from services, commands, or output.
"""

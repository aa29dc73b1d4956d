"""Domain layer — command model, script parsing, loop unrolling, text rules.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""

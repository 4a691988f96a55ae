"""Domain layer — value kinds, value types, descriptors, and schemas.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""

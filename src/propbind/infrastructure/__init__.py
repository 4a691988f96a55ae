"""Infrastructure layer — host collaborators.

Defines the contracts the engine calls out to (type universe, object
lookup, member mutation, layer names) and in-process implementations of
each. It may import from domain but never from services, commands, or output.
"""

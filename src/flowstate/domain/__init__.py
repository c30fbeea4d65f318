"""Domain layer: durations, entities, commands and the allocation simulation.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""

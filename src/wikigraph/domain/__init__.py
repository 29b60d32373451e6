"""Domain layer — link parsing, corpus scans, and context rendering.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""

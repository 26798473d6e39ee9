"""Domain layer: declarations, kinds, rules, and validation outcomes.

This layer depends only on stdlib and pydantic.
It must never import from config, output, or commands.
"""

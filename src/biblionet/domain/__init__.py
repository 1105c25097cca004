"""Domain layer — matrix model, option enums, and errors.

This layer depends only on stdlib, pydantic, numpy and pandas.
It must never import from services, infrastructure, commands, or config.
"""

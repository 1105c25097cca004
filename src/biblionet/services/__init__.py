"""Service layer — the plotting pipeline and its ServiceResult contract.

Services may import from domain and infrastructure layers.
They must never import from commands or output.
"""

"""Infrastructure layer — graph engine, VOSviewer process, matplotlib canvas.

This layer depends on stdlib and third-party libs (NetworkX, igraph, matplotlib).
It must never import from domain, services, commands, or output.
The service layer bridges between domain models and infrastructure.
"""

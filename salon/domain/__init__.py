"""
Domain packages

Each entity keeps its router, service, repository and schemas together.
"""

"""MediaShelf personal media library backend.

The package keeps the hierarchical asset lifecycle (folder tree, trash,
locked folder and storage quota) behind thin FastAPI routers. Services are
assembled in :mod:`.dependencies` and exposed by :func:`.main.create_app`.
"""

__all__: list[str] = []

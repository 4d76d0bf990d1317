"""Application package root.

Admin back office for illustrated-book production projects. The Flask app
is assembled in ``storyadmin.startup.wiring``; request guards live in
``storyadmin.routes`` and the counting / CRUD logic in
``storyadmin.services``.
"""

__all__ = [
]

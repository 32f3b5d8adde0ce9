"""Library book-lending service.

Book catalogue CRUD plus take/return lending backed by a single relational
table, served over HTTP with FastAPI.
"""

__version__ = "0.1.0"

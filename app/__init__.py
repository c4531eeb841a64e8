"""
PlayHub application package.

Layered architecture:

  database.py        SQLAlchemy models and read helpers (pure I/O).
  app/services/      business logic: filtering rules, pagination,
                     thumbnail URLs, listing assembly.

Route handlers in ``playhub_web.py`` build the services once at import time
and pass a per-request SQLAlchemy session into every call, keeping the HTTP
layer separate from the domain.
"""

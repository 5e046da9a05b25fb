"""
Repository layer for data access.

Repositories encapsulate SQLAlchemy queries for each domain area and operate on
the request-scoped AsyncSession provided by tasvideos.db.session.get_async_session.
"""

"""
Service layer: business logic built on top of repositories.
"""

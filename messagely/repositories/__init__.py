"""
Persistence adapters.

Services receive a repository at construction time instead of opening
database sessions themselves, so tests can hand them a repository bound to a
temporary database.
"""

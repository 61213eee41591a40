"""
High-level use cases for the Messagely API.

IdentityService, MessageDirectory and ProfileResolver each receive a
repository at construction; routers call these services instead of touching
the database directly.
"""

"""
Core utilities shared across the Messagely backend.

Configuration, password hashing and logging setup live here so that services
and routers never read os.environ or touch the hashing library directly.
"""

"""
FastAPI routers grouped by domain (auth, users).

Each module exposes an APIRouter included by messagely.app.create_app.
Services are read from app.state so tests can swap them.
"""

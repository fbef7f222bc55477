"""
Message board backend.

This package provides a FastAPI application that verifies Firebase ID
tokens, gates admin reads behind a configured allow-list and stores
chat-style messages through a SQLAlchemy-backed table.
"""

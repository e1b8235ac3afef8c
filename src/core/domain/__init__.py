"""Domain models.

Why:
- The data structures the service exchanges live here (Pydantic v2 + the JSON codec).
- The domain knows nothing about HTTP, the CLI or httpx: only service concepts.
"""

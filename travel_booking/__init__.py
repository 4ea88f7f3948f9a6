"""Corporate travel booking service.

Domain services for employee registration and travel bookings, backed by an
in-memory or Redis key-value store and exposed over a thin FastAPI layer.
"""

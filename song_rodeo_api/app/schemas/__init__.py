"""
Pydantic schema definitions for API payloads.

Each domain (rodeos, songs, ratings) defines its own Pydantic models
for request and response bodies.  Schemas are separated from the
database layer to decouple API representation from persistence.
"""

"""
Service layer abstraction.

Each service encapsulates the business logic for a domain (rodeos,
songs, ratings, aggregates) and raises the errors defined in
``core.errors``.  API handlers only translate HTTP to service calls.
"""

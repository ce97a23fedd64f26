"""
Service layer for the Lab Manager API.

Services encapsulate business logic and operate on the ``EntityStore``
passed to them by the API layer.  Each service class corresponds to a
domain and exposes async classmethods.
"""

"""
Pydantic schema definitions for API payloads and stored entities.

Each domain (members, meetings, rotation, announcements, audit logs)
defines its own models for request bodies and for the stored entity.
Field names are snake_case in Python and camelCase on the wire and in
the snapshot file.
"""

"""
Pydantic schema definitions for directory payloads.

Schemas mirror the JSON exchanged with the remote People endpoint and
are kept separate from the HTTP client so that decoding rules can be
tested on their own.
"""

from .person import PeopleEnvelope, Person

__all__ = ["Person", "PeopleEnvelope"]

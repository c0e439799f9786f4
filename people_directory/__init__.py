"""
Top-level package for the People directory console.

Shared building blocks live here: ``core`` holds configuration and
logging setup, ``schemas`` the pydantic models exchanged with the
remote service.  The HTTP client (``people_api``) and the interactive
shell (``people_console``) are top-level modules next to this package.
"""

__all__ = []

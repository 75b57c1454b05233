"""HTTP helpers shared by the route modules."""

from webdist.http.content import content_type_for, file_response

__all__ = ["content_type_for", "file_response"]

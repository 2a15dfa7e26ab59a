"""Exceptions shared across service modules; routers map them to HTTP codes."""


class NotFoundError(Exception):
    """A referenced record does not exist (404)."""


class ConflictError(Exception):
    """The write would break a soft uniqueness rule (409)."""

"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Services hold no per-call state; they are constructed once per request
    scope and receive their collaborators through the constructor.
    """

    pass

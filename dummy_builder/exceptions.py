"""Exceptions raised by the builder and mapped to HTTP statuses by the API."""


class BuilderError(Exception):
    """Base class for builder errors."""


class NoPayloadError(BuilderError):
    """No payload can be built for the requested slot and parent (HTTP 204)."""

    def __init__(self, message: str = "no payload available"):
        self.message = message
        super().__init__(message)


class LogicError(BuilderError):
    """Internal invariant violation that well-formed upstream data never triggers (HTTP 500)."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UnbindPayloadError(BuilderError):
    """No committed payload matches a blinded block (HTTP 500).

    Raised when the payload was never bid on, was already revealed, or was
    evicted from the payload cache.
    """

    def __init__(self, root: bytes):
        self.root = root
        super().__init__(f"no payload committed for root 0x{root.hex()}")


class InvalidRequestError(BuilderError):
    """Request parameters or body could not be decoded (HTTP 400)."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

"""
Errors raised by the stores.

Handlers select the HTTP outcome by exception class; anything that is only a
StoreError is reported to the client as an internal error.
"""


class StoreError(Exception):
    """Opaque persistence failure"""


class RecordNotFoundError(StoreError):
    def __init__(self, message: str = "record not found"):
        super().__init__(message)


class DuplicateNameError(StoreError):
    def __init__(self, message: str = "duplicate name"):
        super().__init__(message)


class ActorsNotFoundError(StoreError):
    def __init__(self, message: str = "one or more actor IDs do not exist"):
        super().__init__(message)


class QueryTimeoutError(StoreError):
    def __init__(self, message: str = "query timed out"):
        super().__init__(message)

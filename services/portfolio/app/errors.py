from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import exc as sa_exc


class StoreError(Exception):
    """Base failure talking to the persistent store.

    Carries the entity kind and repository operation that failed so callers can
    log it without inspecting the chained driver exception.
    """

    def __init__(self, message: str, *, kind: str | None = None, operation: str | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.operation = operation


class StoreUnavailable(StoreError):
    """Connectivity or transport failure."""


class ConstraintViolation(StoreError):
    """The store rejected a write (constraint, type or schema mismatch)."""


@contextmanager
def translate_store_errors(kind: str, operation: str) -> Iterator[None]:
    try:
        yield
    except (sa_exc.IntegrityError, sa_exc.DataError, sa_exc.ProgrammingError) as e:
        raise ConstraintViolation(f"{operation} {kind} rejected by store", kind=kind, operation=operation) from e
    except (sa_exc.OperationalError, sa_exc.InterfaceError, sa_exc.DisconnectionError) as e:
        raise StoreUnavailable(f"{operation} {kind}: store unavailable", kind=kind, operation=operation) from e
    except sa_exc.DBAPIError as e:
        if e.connection_invalidated:
            raise StoreUnavailable(f"{operation} {kind}: connection lost", kind=kind, operation=operation) from e
        raise ConstraintViolation(f"{operation} {kind} rejected by store", kind=kind, operation=operation) from e
    except OSError as e:
        # Drivers surface refused/reset sockets as bare OSError during connect.
        raise StoreUnavailable(f"{operation} {kind}: store unavailable", kind=kind, operation=operation) from e

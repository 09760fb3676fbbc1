from __future__ import annotations


class CourtsideError(Exception):
    pass


class StoreError(CourtsideError):
    pass


class StoreReadError(StoreError):
    pass


class StoreWriteError(StoreError):
    pass


class AuthError(CourtsideError):
    pass


class ValidationError(CourtsideError):
    def __init__(self, errors: list[str] | str) -> None:
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))

"""
Field-level validation error accumulator.

A Validator is created per request, filled by the validate_* rules in
app/schemas/validation.py and thrown away once the response is written.
"""
from typing import Dict


class Validator:
    """Collects at most one message per field; the first failure wins."""

    def __init__(self):
        self.errors: Dict[str, str] = {}

    def valid(self) -> bool:
        return not self.errors

    def add_error(self, field: str, message: str) -> None:
        if field not in self.errors:
            self.errors[field] = message

    def check(self, ok: bool, field: str, message: str) -> None:
        if not ok:
            self.add_error(field, message)


def permitted_value(value, *permitted) -> bool:
    return value in permitted

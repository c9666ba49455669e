"""
Input checks shared by the inventory managers.

Errors are collected per field so a caller receives every problem with a
payload at once, as a list of ``{'field', 'message'}`` entries.
"""

from __future__ import annotations

import re
from datetime import date

from gym_backoffice.buisness.inventory.exceptions import ValidationError


class FieldErrors:
    """Collects field-level validation failures."""

    def __init__(self):
        self.errors: list[dict[str, str]] = []

    def __bool__(self):
        return bool(self.errors)

    def add(self, field: str, message: str) -> None:
        self.errors.append({'field': field, 'message': message})

    def raise_if_any(self) -> None:
        if self.errors:
            raise ValidationError(details=list(self.errors))

    @staticmethod
    def _is_blank(value) -> bool:
        return value is None or (isinstance(value, str) and not value.strip())

    def integer(self, field, value, minimum, maximum, message, required=True, required_message=None):
        """Parse ``value`` as an integer within [minimum, maximum]; None when missing or invalid."""
        if self._is_blank(value):
            if required:
                self.add(field, required_message or f"{field} is required")
            return None

        parsed = None
        if isinstance(value, bool):
            parsed = None
        elif isinstance(value, int):
            parsed = value
        elif isinstance(value, float) and value.is_integer():
            parsed = int(value)
        elif isinstance(value, str) and re.fullmatch(r"-?\d+", value.strip()):
            parsed = int(value.strip())

        if parsed is None or parsed < minimum or parsed > maximum:
            self.add(field, message)
            return None
        return parsed

    def decimal(self, field, value, minimum, maximum, message, required=True, required_message=None):
        """Parse ``value`` as a float within [minimum, maximum]."""
        if self._is_blank(value):
            if required:
                self.add(field, required_message or f"{field} is required")
            return None
        if isinstance(value, bool):
            self.add(field, message)
            return None
        try:
            parsed = float(value)
        except (TypeError, ValueError):
            self.add(field, message)
            return None
        if parsed != parsed or parsed < minimum or parsed > maximum:
            self.add(field, message)
            return None
        return round(parsed, 2)

    def text(self, field, value, max_length, message, min_length=0, required=False, required_message=None):
        """Trimmed string, or None when optional and blank."""
        if self._is_blank(value):
            if required:
                self.add(field, required_message or f"{field} is required")
            return None
        if not isinstance(value, str):
            value = str(value)
        value = value.strip()
        if len(value) < min_length or len(value) > max_length:
            self.add(field, message)
            return None
        return value

    def choice(self, field, value, choices, message, required=False, default=None):
        if self._is_blank(value):
            if required:
                self.add(field, f"{field} is required")
            return default
        if value not in choices:
            self.add(field, message)
            return None
        return value

    def pattern(self, field, value, regex, message, max_length=255):
        """Optional string that must fully match ``regex``."""
        value = self.text(field, value, max_length, message)
        if value is not None and not re.fullmatch(regex, value):
            self.add(field, message)
            return None
        return value

    def iso_date(self, field, value, message=None):
        """Optional ``YYYY-MM-DD`` date."""
        if self._is_blank(value):
            return None
        try:
            return date.fromisoformat(str(value).strip())
        except ValueError:
            self.add(field, message or f"{field} must be a date in YYYY-MM-DD format")
            return None

"""Errors raised by the pricing and stock engine.

Malformed input is reported with protean's ``ValidationError`` shape
(``{field: [messages]}``) so that write boundaries and the HTTP layer treat
engine rejections exactly like aggregate rule violations.
"""

from protean.exceptions import ValidationError


class InvalidDiscountWindow(ValidationError):
    """A discount percentage is out of range or its window is incomplete/inverted."""


class InvalidQuantity(ValidationError):
    """A stock quantity is negative or a low-stock threshold is not positive."""


class NotificationPublishFailure(Exception):
    """A stock notice could not be appended to the notification store."""

    def __init__(self, message, notice=None):
        super().__init__(message)
        self.notice = notice

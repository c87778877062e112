"""
Domain errors raised by the storage facade and the submission flow.

Each error carries the HTTP status the app factory translates it to.
"""

from __future__ import annotations


class GrantdeskError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(GrantdeskError):
    status_code = 404


class DuplicateApplicationError(GrantdeskError):
    status_code = 400

    def __init__(self, user_id: str, grant_id: str):
        super().__init__("You have already applied to this grant")
        self.user_id = user_id
        self.grant_id = grant_id

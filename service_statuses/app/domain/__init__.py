"""
Domain layer for the Statuses service: records, boundary validation and
page resolution (see ``resolver``).
"""

from .models import Author, AuthoredStatus, Banner, Status, StatusPageData

__all__ = ["Author", "AuthoredStatus", "Banner", "Status", "StatusPageData"]

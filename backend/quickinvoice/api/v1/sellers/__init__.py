"""Sellers API package."""

from quickinvoice.api.v1.sellers.routes import router

__all__ = ["router"]

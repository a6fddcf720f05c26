"""Seller domain exceptions."""

from quickinvoice.services.exceptions import NotFoundError


class SellerNotFound(NotFoundError):
    """Seller not found."""

    pass

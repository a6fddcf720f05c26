"""Seller services."""

"""Invoices API package."""

from truckbill.api.v1.invoices.routes import router

__all__ = ["router"]

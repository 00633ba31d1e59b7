"""Services module.

This module provides the service layer architecture:
- exceptions: Custom service exceptions
- invoices: Invoice numbering, persistence and history services
"""

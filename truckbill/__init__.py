"""Invoicing backend for a trucking business."""

__version__ = "0.1.0"

"""Observability utilities for the interview access service."""
from .logger import log_event

__all__ = ["log_event"]

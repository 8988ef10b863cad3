"""Утилиты Nova Client."""

from .sanitizer import mask_sensitive_data, is_sensitive_key

__all__ = ["mask_sensitive_data", "is_sensitive_key"]

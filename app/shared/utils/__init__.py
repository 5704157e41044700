"""Shared utilities: id generation."""

from app.shared.utils.generators import generate_cuid

__all__ = ["generate_cuid"]

"""Prism package root."""

from prism.authority import Authority
from prism.exceptions import PrismError

__all__ = ["__version__", "Authority", "PrismError"]

__version__ = "0.2.0"

"""Pro-rata pricing and booking arithmetic service for OOH media plans and campaigns."""

__version__ = "0.1.0"

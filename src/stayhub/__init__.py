"""
Stayhub GraphQL gateway
Booking, payment and experience API composed over a hosted GraphQL backend
"""

__version__ = "0.1.0"

__all__ = ["__version__"]

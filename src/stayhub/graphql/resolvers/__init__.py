"""Resolver bindables for the gateway schema.

Fields without a resolver here are read from the parent value by name.
"""

from . import account, booking, experiences, home, homepage, payment, viewer

bindables = [
    homepage.query,
    experiences.query,
    viewer.query,
    experiences.experiences_by_city,
    home.home,
    viewer.viewer,
    account.mutation,
    payment.mutation,
    booking.mutation,
]

__all__ = ["bindables"]

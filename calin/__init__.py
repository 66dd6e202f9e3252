"""
Cal.in - event types, weekly availability and bookings with slot computation.
"""

__version__ = "0.1.0"

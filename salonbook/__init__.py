"""
salonbook - availability and appointment status engine for salon bookings.
"""

__version__ = "0.1.0"

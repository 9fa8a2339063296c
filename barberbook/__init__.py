"""
barberbook - slot availability and conflict-free booking for barbershops.
"""

__version__ = "0.1.0"

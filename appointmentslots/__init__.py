"""
Appointment slot availability resolver.
"""

__version__ = "0.1.0"

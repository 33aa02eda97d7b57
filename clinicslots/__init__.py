"""
clinicslots - doctor availability and appointment slot generation.
"""

__version__ = "0.1.0"

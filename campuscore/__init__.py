"""
CampusCore Records - client-side record reconciliation for college administration.
"""

__version__ = "1.0.0"

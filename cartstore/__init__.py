"""
Cart store for a shoe shop front end.

Holds the products a user intends to buy, checks them against stock and
keeps the cart across restarts.
"""

__version__ = "0.1.0"

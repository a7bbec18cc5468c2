"""
Car Rental API: authentication, car inventory and order lifecycle.
"""
__version__ = "1.0.0"

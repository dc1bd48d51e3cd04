"""
                JWT Pizza Service

REST backend for a pizza-ordering platform: registration and
authentication with allow-listed JWTs, franchise and store management,
menu management, and order placement fulfilled by an external pizza
factory.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"

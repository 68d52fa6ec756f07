"""
srrclient: terminal client for the srrdb.com scene release database.
"""

__version__ = "1.0.0"
BUILD_COMMIT = "unknown"
BUILD_DATE = "unknown"

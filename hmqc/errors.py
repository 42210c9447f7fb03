# file: hmqc/errors.py

"""
Root of the HMQC exception hierarchy.

Each pipeline stage defines its own errors module; every class there
inherits from HMQCError so callers can catch the whole family at once.
"""


class HMQCError(Exception):
    """Base exception for all HMQC operations."""
    pass


class ConfigurationError(HMQCError):
    """Raised when configuration is missing, unreadable or invalid."""
    pass

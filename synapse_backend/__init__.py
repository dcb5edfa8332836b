"""Synapse backend - AI provider gateway and editing services for the Synapse editor"""

__version__ = "0.1.0"

"""Operator tools for the ActiveMQ message scheduler."""

__version__ = "0.1.0"

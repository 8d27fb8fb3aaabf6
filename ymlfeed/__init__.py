"""Serve a dance school's classes and passes from MySQL as a YML product feed over HTTP."""

__version__ = "0.1.0"
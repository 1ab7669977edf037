"""Core runtime support.

This package holds configuration, errors, logging and shared types
used by the schema and store layers.
"""

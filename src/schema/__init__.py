"""Type descriptors and conformance checks.

This package describes expected data shapes and validates untyped
values against them before they are trusted as records.
"""

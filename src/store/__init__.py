"""Storage layer.

This package persists entity collections as validated JSON documents.
It powers id assignment and CRUD operations for the SDK.
"""

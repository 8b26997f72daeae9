"""Versioned object storage layer.

This module reads and writes the single synchronized document in S3.
It enforces version-based conflict detection for every access.
"""

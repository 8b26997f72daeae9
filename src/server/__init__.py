"""HTTP sync endpoint.

This module exposes the versioned document store over HTTP.
It translates store outcomes into HTTP status codes.
"""

"""Sync client for the HTTP endpoint.

This module talks to a notesync server and keeps a local file
in step with the remote document.
"""

"""Storage layer for handles, histories, and objects.

This module persists the repository state document and powers the
collaborators driven by the identifier provider.
"""

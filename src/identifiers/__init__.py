"""Version-aware persistent identifier management.

This package decides which handle every content object carries and keeps
each work's canonical handle bound to its latest version.
"""

"""Command line tool for installer-assets.

This is exposed for CLI documentation, not to be used as a library.
"""

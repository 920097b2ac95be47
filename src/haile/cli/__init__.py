"""CLI layer: argument parsing, rendering and the error boundary.

This package is the outermost layer.  It may import from any other
haile module, but nothing outside ``haile.cli`` imports from it.
"""

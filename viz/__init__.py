"""
Visualization Package.

This package provides plotting helpers for popenv environments. Output
buffers are turned into plain-data panels that can be inspected directly
or rendered with matplotlib to check how each feature is encoded.
"""

# Visualization Package

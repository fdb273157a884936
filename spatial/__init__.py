"""
Spatial Package.

This package provides the geometric side of trial generation for popenv
environments. It includes:

- Grid points and derived quantities (Euclidean distance, bearing angle,
  egocentric offsets)
- Bounded rejection sampling of point pairs under distance constraints

These helpers produce the raw quantities that the population encoders in
`popenv_core` turn into activation patterns.
"""

# Spatial Package

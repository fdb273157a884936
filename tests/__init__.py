"""
Tests Package.

This package contains test suites for validating the popenv implementation,
including unit tests for the population codes, counters, geometry and
sampling, and integration tests for the environment, compiler and CLI. The
tests ensure correctness of encoding and decoding, trial sampling, and
counter rollover.
"""

# Tests Package

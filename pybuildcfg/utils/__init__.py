"""Utility modules for the pybuildcfg application.

This package contains helper modules for reading descriptors from TOML, JSON
and Gradle files, and for collecting signing credentials from the
environment and `key.properties` files.
"""

"""Core components for the pybuildcfg application.

This package contains the configuration model and its loader, the signing
and plugin resolution rules, the tool's own settings manager, and the engine
that runs build-time validators against a loaded configuration.
"""

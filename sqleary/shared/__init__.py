"""
Shared Components

Exceptions and data models used across the package.
"""

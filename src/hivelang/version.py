"""
Central version constant for Hivelang.
"""

__version__ = "3.0.0"

# Script grammar version (independent of the package version)
LANGUAGE_VERSION = "v3"

"""
Version information for the Kazi Mashinani dashboard.

This file is the single source of truth for version numbers.
The Flask app reports it on /health and in the page footer.
"""

__version__ = "1.0.0"
__version_info__ = (1, 0, 0)

# Build metadata (set by CI/CD or manually)
BUILD_DATE = "2026-10-17"
GIT_COMMIT = None  # Will be set at runtime if available

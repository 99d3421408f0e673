# arimakit/version.py
"""
ARIMA Kit Version Information

This module contains version information and package metadata for ARIMA Kit.
It centralizes version tracking, making it accessible programmatically via
arimakit.__version__ and arimakit.get_version().

ARIMA Kit follows semantic versioning (MAJOR.MINOR.PATCH):
- MAJOR: Incompatible API changes
- MINOR: Backwards-compatible functionality additions
- PATCH: Backwards-compatible bug fixes
"""

# Version components
VERSION_MAJOR = 0
VERSION_MINOR = 3
VERSION_PATCH = 0

# Full version string
__version__ = f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}"

# Package metadata
__title__ = "ARIMA Kit"
__description__ = "ARIMA parameter estimation by conditional sum of squares"
__license__ = "MIT"

# Python version requirements
__python_requires__ = ">=3.10"

# Package dependencies
__dependencies__ = {
    "numpy": ">=1.26.0",
    "scipy": ">=1.11.3",
    "pandas": ">=2.1.1",
    "numba": ">=0.58.0",
}

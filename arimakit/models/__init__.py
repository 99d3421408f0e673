"""
ARIMA Kit Models Module

This module groups the model estimators. Univariate time series models live
in :mod:`arimakit.models.time_series`.
"""

import logging

# Set up module-level logger
logger = logging.getLogger("arimakit.models")

from . import time_series

__all__ = ['time_series']

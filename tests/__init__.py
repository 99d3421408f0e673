"""
ARIMA Kit Test Suite

This package contains tests for ARIMA Kit: the correlation functions, the
Yule-Walker solvers, CSS residuals and fitting, automatic order selection,
the series utilities and the core configuration and error layers.
"""

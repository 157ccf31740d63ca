"""
Core module - settings, logging, errors and authentication.
"""

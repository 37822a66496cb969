"""
BigPdfMerge - Utils Package

Utility modules for the application: logging, translations, exceptions,
notifications, configuration and formatting helpers.
"""

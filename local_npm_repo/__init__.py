"""
Local NPM Repository Manager: a cache-first installer for npm packages.
"""
__version__ = '1.0.0'

"""
AI Part Finder - identify industrial parts from a free-text description
"""
__version__ = "0.1.0"

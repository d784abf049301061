"""
CrowdSense - crowd scoring and redirection for tourist destinations.
"""
__version__ = "0.1.0"

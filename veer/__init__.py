"""
VEER - local system agent and assistant backend services.
"""
__version__ = "0.1.0"

"""
Command implementations for the veer entry point.
"""

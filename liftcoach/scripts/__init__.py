"""
Command-line scripts for offline session analysis.
"""

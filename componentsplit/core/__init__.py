"""
Core components for componentsplit.
"""

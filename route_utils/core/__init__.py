"""
Core route helpers: resolver, wrappers, configuration and logging
"""

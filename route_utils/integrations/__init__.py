"""
Host framework integrations
"""

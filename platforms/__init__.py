"""
Platform integrations.
"""

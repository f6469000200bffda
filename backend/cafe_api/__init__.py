"""
Maid cafe REST API.
"""

"""
Payment provider webhook endpoint.
"""

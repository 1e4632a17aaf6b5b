"""
Inspection endpoints
"""

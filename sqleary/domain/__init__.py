"""
Query Domain Logic
"""

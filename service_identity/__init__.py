"""
Identity service for the Identity Access layer.
"""

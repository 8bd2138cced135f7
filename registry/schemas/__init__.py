"""
Tool schemas grouped by concern
"""

"""
Configuration for HireLoop
"""

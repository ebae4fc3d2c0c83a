"""
In-memory result, history and health stores.
"""

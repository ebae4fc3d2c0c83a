"""
JSON-RPC transport systems.
"""

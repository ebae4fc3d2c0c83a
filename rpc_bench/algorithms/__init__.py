"""
Measurement algorithms: rounds, latency tests, health sweeps and scheduling.
"""

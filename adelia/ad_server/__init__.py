"""
HTTP service fronting the creative engine.
"""

"""
HTTP layer over :mod:`saher` (FastAPI).
"""

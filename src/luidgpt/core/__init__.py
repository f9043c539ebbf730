"""
Core runtime for LuidGPT: HTTP pipeline, credential storage and session.
"""

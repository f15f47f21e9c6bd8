"""
Utilities Package for URL Keep-Alive

Logging, time helpers and input validation.
"""

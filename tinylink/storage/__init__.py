"""
Link stores: record type, snapshot format, in-memory and flat-file backends.
"""

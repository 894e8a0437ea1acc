"""
Key generation and link creation rules.
"""

"""
Command-line front end for interncli.
"""

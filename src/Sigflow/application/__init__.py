"""
Sigflow application layer: the session object and the command line interface.
"""

"""
Sigflow infrastructure: file readers, exporters and pipeline persistence.
"""

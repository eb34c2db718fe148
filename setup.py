#!/usr/bin/env python3
"""
Setup shim for Sigflow
Simple pip-based installation that works with conda environments
"""

from setuptools import setup

# All configuration lives in pyproject.toml
setup()

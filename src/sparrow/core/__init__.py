"""Pixel pipeline, history and preview scaling.

Nothing in this package imports Qt, so it can be used headless from scripts
and the command line.
"""

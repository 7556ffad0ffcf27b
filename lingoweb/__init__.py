"""
LingoWeb

Translate whole webpages with a text-generation model while keeping their
HTML structure, and show the original and translated pages side by side.
"""

__version__ = "0.1.0"

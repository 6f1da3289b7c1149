"""
Supplement Claims Validator

Batch validation of supplement claim records against JSON schemas,
controlled vocabularies, filename conventions and DOI citations.
"""

__version__ = "1.0.0"

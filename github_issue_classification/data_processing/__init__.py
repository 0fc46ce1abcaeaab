"""
Subpackage for text preprocessing helpers.

The `utils` module holds the normalisation and tokenisation functions
shared by the title and description featurizers.
"""

__all__ = ["utils"]

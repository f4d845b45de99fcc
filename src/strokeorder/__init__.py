"""strokeorder: stroke order derivation from Ideographic Description Sequences."""

__version__ = "0.3.0"

"""Caption acquisition, normalization and proofreading."""

__version__ = "0.1.0"

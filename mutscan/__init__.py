"""Mutation calling from SAM alignments, VCF-to-CSV conversion and accuracy scoring."""

__version__ = "0.1.0"
__all__ = ["accuracy", "caller", "converter"]
"""Cryptanalysis workbench for a Caesar/substitution block cipher."""

__version__ = "0.1.0"

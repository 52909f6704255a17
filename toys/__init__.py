"""Toys project builder: module discovery, compilation and shell rendering."""

__version__ = "1.0.0"

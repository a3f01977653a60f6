"""Generate Swift structs and enums from algebraic data type descriptors."""

__version__ = "0.1.0"

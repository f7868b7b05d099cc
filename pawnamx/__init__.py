"""Read Pawn abstract machine programs, their memory sections and their symbolic debug information."""

__version__ = "0.1.0"
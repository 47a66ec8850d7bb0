"""A reference-image board: frames on a pannable, zoomable canvas with polygon packing."""

__version__ = "0.1.0"
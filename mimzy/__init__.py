"""Triangle ray intersection with BVH and k-d tree acceleration structures, and a PPM renderer."""

__version__ = "0.1.0"
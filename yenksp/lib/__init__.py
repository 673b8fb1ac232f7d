"""Graph, path and search primitives for yenksp."""

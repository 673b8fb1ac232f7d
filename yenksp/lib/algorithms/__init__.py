"""Shortest-path and k-shortest-path search algorithms."""

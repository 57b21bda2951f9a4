"""Analog placement building blocks: symmetry groups, contours, adaptive
perturbation, timeouts, problem file I/O and simulated annealing."""

__version__ = "0.1.0"

__all__ = ["symmetry", "contour", "adaptive", "timeout", "parser", "annealing"]
"""A 2D drawing API that renders shapes, gradients and images to SVG documents."""

__version__ = "0.1.0"
"""code-link: order annotated source modules by their requirements and bundle them."""

__version__ = "0.1.0"

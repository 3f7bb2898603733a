"""User interface components for Device Console."""

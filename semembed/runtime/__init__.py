"""Runtime primitives: the inference gate and shared service state."""

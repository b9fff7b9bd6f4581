"""symkernel - a Jupyter kernel for Mathematica-style symbolic math on sympy."""

__version__ = "1.0.0"

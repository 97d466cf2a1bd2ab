"""CL Prompt Studio: authoring workspace for Computation Layer code."""

__version__ = "1.0.0"

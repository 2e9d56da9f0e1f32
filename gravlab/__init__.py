"""Describe Jupyter Lab workstation environments for ARM cloud instances and tunnel to them."""

__version__ = "0.5.0"
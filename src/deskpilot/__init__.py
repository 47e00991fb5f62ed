"""Deskpilot - AI-assisted reply composer for customer support agents."""

__version__ = "0.1.0"

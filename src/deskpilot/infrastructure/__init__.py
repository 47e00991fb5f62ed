"""Infrastructure layer - concrete stores behind the domain protocols.

The infrastructure layer implements domain protocols and has no dependencies
on the application or presentation layers.
"""

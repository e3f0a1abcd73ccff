"""Infrastructure Layer.

Concrete adapters for the terrain ports: elevation provider over HTTP,
numpy plane mesh, TOML configuration files.
"""

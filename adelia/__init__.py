"""
Adelia – interactive ad creative engine.

Renders rich-media creatives from typed settings, packages them as an
offline archive plus a hosted document, and emits the publisher loader
snippet that mounts them.
"""

__version__ = "0.3.0"

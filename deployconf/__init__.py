"""
deployconf — deployment configuration resolution for container stacks.
"""

__version__ = "0.1.0"

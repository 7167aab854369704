"""
passkeep - local credential manager with a password generator.
"""

__version__ = "0.1.0"

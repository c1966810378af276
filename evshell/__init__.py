"""An embeddable command shell with variables, substitutions and built-in commands."""

__version__ = "0.1.0"
__all__ = ["command", "shell", "syscli", "varpool"]
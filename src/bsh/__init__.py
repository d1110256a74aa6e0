"""
bsh - Bash Shortcut Helper
Organizes frequently used shell commands into categories and runs them by alias.
"""

__version__ = "0.2.0"

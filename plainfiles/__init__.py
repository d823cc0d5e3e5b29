"""
PlainFiles - Source Package

A terminal record manager for a person registry kept in plain text files.

DESIGN PRINCIPLES:
1. One operator, authenticated before anything else
2. Three failed logins block the user for good
3. Invalid records never enter the registry
4. Every change is audited
5. Nothing is written until the operator saves
"""

__version__ = "1.0.0"
__author__ = "PlainFiles Team"

"""
gohome launcher — installs and fronts the prebuilt ``gohome`` binary.
"""

__version__ = "1.2.3"

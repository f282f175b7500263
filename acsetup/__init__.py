"""
acsetup - Assetto Corsa setup helper for Linux

Configures Assetto Corsa running under Proton: GE-Proton, Content Manager,
Custom Shaders Patch and DXVK.
"""

__version__ = "1.0.0"

"""
CLI frontend for acsetup
"""

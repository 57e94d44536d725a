"""
cli - quake-inventory command line interface (click + rich)
"""

"""
Services for file I/O and settings.
"""

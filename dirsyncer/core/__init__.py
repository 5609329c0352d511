"""
Synchronization engine: data models, planning and execution.
"""

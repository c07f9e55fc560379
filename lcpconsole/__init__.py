"""
Back-office console for a content licensing service.
"""

__version__ = "0.1.0"

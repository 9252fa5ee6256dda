"""
quizcheck - Answer checking for the mentee learning portal.
"""

__version__ = "1.0.0"

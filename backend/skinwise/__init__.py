"""SkinWise backend.

AI-assisted skin condition analysis, ingredient checks and follow-up chat.
"""

__version__ = "0.1.0"

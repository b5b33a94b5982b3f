"""
Star Invaders: a single-screen arcade shooter built on pygame.
"""

__version__ = "0.1.0"

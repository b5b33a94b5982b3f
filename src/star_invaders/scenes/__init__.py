"""
Star Invaders scenes. Every module here is imported by scene discovery.
"""

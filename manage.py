"""
This is the main file to run the game.
It imports the run function from the star_invaders app and runs it.
"""

from star_invaders.app import main

if __name__ == "__main__":
    main()

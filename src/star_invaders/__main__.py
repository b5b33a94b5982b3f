from star_invaders.app import main

main()

from swarm_quorum.cli import main

main()

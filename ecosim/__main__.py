from ecosim.cli.main import main

main()

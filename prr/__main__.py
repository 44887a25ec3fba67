from prr.cli.app import main

main()

from autorelease.cli.app import main

main()

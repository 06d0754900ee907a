from odc.cli.app import main

main()

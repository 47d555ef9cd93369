from ucloudctl.cli import main

main()

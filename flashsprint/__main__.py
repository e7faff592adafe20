from flashsprint.cli import main

main()

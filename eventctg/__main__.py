from eventctg.cli import main

main()

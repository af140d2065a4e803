from press_sync.cli import main

main()

from recordkeeper.app import main

main()

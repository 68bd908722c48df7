from cadastro.app import main

main()

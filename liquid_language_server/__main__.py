from liquid_language_server.server import main

main()

from depart_mcp.server import main

main()

from things3_mcp.cli import main

main()

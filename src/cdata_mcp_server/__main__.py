"""``python -m cdata_mcp_server``"""

from . import main

if __name__ == "__main__":
    main()

"""Allow running as `python -m memvid_mcp`."""

from memvid_mcp.cli import main

if __name__ == "__main__":
    main()

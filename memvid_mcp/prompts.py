"""
Server instructions - sent to the client during the MCP handshake
"""

from memvid_mcp.formatting import example_input_path, example_mv2_path

SERVER_INSTRUCTIONS = f"""
memvid MCP server connected. Every tool runs one `memvid` sub-command against a .mv2 memory file.

## Paths

- Always pass absolute paths for the OS the memvid binary runs on (e.g. {example_mv2_path()}).
- Paths containing `..` are rejected.
- System, log and credential locations (/etc, /proc, /sys, /var/log, /root, ~/.ssh, C:\\Windows, System32) are rejected.
- If your client declares MCP roots, every path must be inside one of them. Paths outside the roots are rejected
  with a hint; add the folder to the client's roots instead of retrying.

## Getting started

1. memvid_create - create a memory file
2. memvid_put - ingest a file or directory (e.g. input={example_input_path()}); embed=true enables semantic search
3. memvid_find / memvid_ask - search or ask questions
4. memvid_verify / memvid_doctor - check and repair a file

## Results

- Results are JSON when memvid supports it, otherwise plain text.
- Large results are truncated; narrow the query or use limit/top_k.
- An empty result is reported as an error: usually a wrong path or an empty memory file.
"""

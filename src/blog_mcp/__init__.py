"""
blogMCP - static publishing pipeline for a Markdown blog, with an MCP read surface.

Stack:
- Python + FastMCP (MCP server)
- PyYAML (front matter)
- Python-Markdown + Jinja2 (rendering)
- Markdown (source of truth)
"""

__version__ = "0.1.0"

"""MCP server for NoteList."""

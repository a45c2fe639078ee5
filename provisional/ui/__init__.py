"""NiceGUI interface - thin visualization layer for the poem chat.

Responsibilities:
    - Landing page with example prompts
    - Chat transcript display with streaming updates
    - Transcript download as poem.txt
    - Rate-limit notice

Session state lives in ChatSession; the pages only render it and call the
relay endpoint over HTTP.
"""

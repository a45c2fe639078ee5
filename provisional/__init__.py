"""The Provisional - a streaming poem relay with a browser chat UI.

Forwards chat transcripts to a fine-tuned OpenAI model and streams the
generated poem back to a NiceGUI chat page.

Components:
    - api: FastAPI route that relays streaming completions
    - relay: OpenAI client wrapper, generation parameters, relay errors
    - ui: Chat session state and NiceGUI pages
    - models: Request schemas
"""

__version__ = "0.1.0"

"""
Top-level package for the chatbridge Discord plugin.

This package hosts:
- config loading, validation and the immutable plugin configuration
- the model catalog resolver and the chat-completion client (OpenAI/OpenRouter)
- the trigger-word command dispatcher and Discord wiring
- picture mode: HTML templating and headless-browser rendering
"""

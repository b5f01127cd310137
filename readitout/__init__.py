"""
ReadItOut - Turn web articles, tweets and pasted text into podcasts

This package provides tools to:
1. Extract readable content from URLs (with a Twitter/X fallback chain) or raw text
2. Summarize it to a target listening length with an LLM
3. Synthesize narration with Google Cloud TTS, falling back to ElevenLabs
4. Store podcasts, audio and sentence-level transcripts, and share them by link
"""

__version__ = "0.1.0"

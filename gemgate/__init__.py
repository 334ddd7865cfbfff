"""HTTP to Gemini gateway: resolves gemini:// resources and renders Gemtext as HTML."""

__version__ = "0.1.0"

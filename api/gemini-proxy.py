# Vercel serverless function: forwards a prompt to Gemini without exposing
# GEMINI_API_KEY to the browser.
from gemini_proxy.proxy import handler

__all__ = ['handler']

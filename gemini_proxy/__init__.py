"""Serverless proxy that forwards prompts to the Gemini generateContent API."""

from gemini_proxy.proxy import handler, lambda_handler, proxy_request

__all__ = ['handler', 'lambda_handler', 'proxy_request']

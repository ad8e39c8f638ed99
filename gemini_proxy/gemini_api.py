import re
import logging
from dataclasses import dataclass

import requests

logger = logging.getLogger()

MODEL_ID_RE = re.compile(r'^[A-Za-z0-9._-]+$')
MAX_ERROR_BODY = 500


@dataclass(frozen=True)
class GeminiText:
    text: str


@dataclass(frozen=True)
class GeminiEmpty:
    reason: str


@dataclass(frozen=True)
class GeminiFailure:
    status: int
    message: str


class GeminiProtocolError(Exception):
    """The upstream answered with a success status but a body that is not JSON."""


def normalize_model(model):
    """Return a bare model id, or None when it is not safe to put in a URL path."""
    if not isinstance(model, str):
        return None
    model = model.strip()
    if model.startswith('models/'):
        model = model[len('models/'):]
    if not model or not MODEL_ID_RE.match(model) or model in ('.', '..'):
        return None
    return model


def build_payload(prompt, system_instruction=None):
    payload = {
        'contents': [{'role': 'user', 'parts': [{'text': prompt}]}],
    }
    if system_instruction:
        payload['systemInstruction'] = {'parts': [{'text': system_instruction}]}
    return payload


def endpoint_url(api_base, model):
    return f"{api_base}/models/{model}:generateContent"


def call_gemini(payload, model, config, session=None):
    """POST one generateContent request and classify the reply.

    Network and timeout errors from ``requests`` propagate to the caller.
    """
    http = session if session is not None else requests
    url = endpoint_url(config.api_base, model)

    logger.info(f"Calling Gemini model {model}")
    response = http.post(
        url,
        json=payload,
        headers={
            'Content-Type': 'application/json',
            'x-goog-api-key': config.api_key,
        },
        timeout=config.timeout,
    )

    try:
        data = response.json()
    except ValueError:
        if response.ok:
            raise GeminiProtocolError(f"Gemini returned a non-JSON body with status {response.status_code}")
        data = None

    return parse_reply(response.status_code, data, getattr(response, 'text', ''))


def parse_reply(status_code, data, raw_text=''):
    if not 200 <= status_code < 300:
        return GeminiFailure(status=status_code, message=_error_message(data, raw_text))

    if not isinstance(data, dict):
        return GeminiEmpty(reason='Gemini returned an unexpected response shape.')

    candidates = data.get('candidates')
    if not isinstance(candidates, list) or not candidates:
        feedback = data.get('promptFeedback') or {}
        block_reason = feedback.get('blockReason') if isinstance(feedback, dict) else None
        if block_reason:
            return GeminiEmpty(reason=f"The prompt was blocked by Gemini ({block_reason}).")
        return GeminiEmpty(reason='Gemini returned no candidates.')

    first = candidates[0] if isinstance(candidates[0], dict) else {}
    content = first.get('content')
    parts = (content.get('parts') or []) if isinstance(content, dict) else []
    texts = [
        part['text'] for part in parts
        if isinstance(part, dict) and isinstance(part.get('text'), str)
    ]
    if not texts:
        finish_reason = first.get('finishReason')
        if finish_reason:
            return GeminiEmpty(reason=f"Gemini returned a candidate without text (finishReason: {finish_reason}).")
        return GeminiEmpty(reason='Gemini returned a candidate without text.')

    return GeminiText(text=''.join(texts))


def _error_message(data, raw_text):
    if isinstance(data, dict):
        error = data.get('error')
        if isinstance(error, dict) and error.get('message'):
            return str(error['message'])
        if isinstance(error, str) and error:
            return error
    if raw_text and raw_text.strip():
        return raw_text.strip()[:MAX_ERROR_BODY]
    return 'Unknown error while generating content with Gemini.'

import os
import json
import base64
import logging

import requests

from gemini_proxy.config import ProxyConfig
from gemini_proxy.errors import (
    ClientError,
    ConfigurationError,
    EmptyResponseError,
    MethodNotAllowedError,
    ProxyError,
    TransportError,
    UpstreamError,
    redact,
)
from gemini_proxy.gemini_api import (
    GeminiEmpty,
    GeminiFailure,
    GeminiText,
    build_payload,
    call_gemini,
    normalize_model,
)

logger = logging.getLogger()
_level = getattr(logging, os.environ.get('LOG_LEVEL', 'INFO').upper(), None)
logger.setLevel(_level if isinstance(_level, int) else logging.INFO)

GENERIC_DETAIL = 'Internal server error while processing the request.'


def _response(status, payload, config, extra_headers=None):
    headers = {
        'Access-Control-Allow-Origin': config.allowed_origin,
        'Content-Type': 'application/json',
    }
    if extra_headers:
        headers.update(extra_headers)
    return {
        'statusCode': status,
        'headers': headers,
        'body': json.dumps(payload),
    }


def error_response(error, config):
    extra = {'Allow': 'POST'} if isinstance(error, MethodNotAllowedError) else None
    return _response(error.status, error.to_body(), config, extra)


def _first_present(body, *names):
    # blank strings count as absent so a legacy alias can still supply the value
    for name in names:
        value = body.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        return name, value
    return names[0], None


def read_prompt_request(load_body, config):
    """Parse and validate the inbound body.

    Returns ``(prompt, model, system_instruction)``; raises ClientError when
    the body is unusable. Legacy ``userQuery``/``systemPrompt`` names are
    accepted when the canonical ones are absent or blank.
    """
    try:
        body = load_body()
    except Exception:
        raise ClientError('Invalid JSON in request body.')

    if not isinstance(body, dict):
        raise ClientError('Request body must be a JSON object.')

    field, prompt = _first_present(body, 'prompt', 'userQuery')
    if prompt is None:
        raise ClientError(f'Missing "{field}" field in the request.')
    if not isinstance(prompt, str):
        raise ClientError(f'Field "{field}" must be a string.')

    field, system_instruction = _first_present(body, 'systemInstruction', 'systemPrompt')
    if system_instruction is not None and not isinstance(system_instruction, str):
        raise ClientError(f'Field "{field}" must be a string.')

    if body.get('model') is not None:
        model = normalize_model(body['model'])
        if model is None:
            raise ClientError(f'Invalid "model" identifier: {body["model"]!r}.')
    else:
        model = normalize_model(config.model)
        if model is None:
            raise ConfigurationError(f'GEMINI_MODEL {config.model!r} is not a valid model identifier.')

    return prompt, model, system_instruction


def translate_reply(reply):
    if isinstance(reply, GeminiText):
        return reply.text
    if isinstance(reply, GeminiEmpty):
        raise EmptyResponseError(reply.reason)
    if isinstance(reply, GeminiFailure):
        status = reply.status if reply.status >= 400 else 502
        raise UpstreamError(reply.message, status=status)
    raise TypeError(f"Unexpected Gemini reply {type(reply).__name__}")


def proxy_request(method, load_body, config=None, session=None):
    """Run one request through the proxy gates and return a response dict.

    Order: method, credential, payload, upstream call. Every failure is
    turned into the normalized error envelope; nothing propagates.
    """
    if config is None:
        config = ProxyConfig.from_env()

    try:
        if method != 'POST':
            raise MethodNotAllowedError(f"Received {method or 'no method'}, use POST.")

        if not config.api_key:
            raise ConfigurationError('GEMINI_API_KEY was not found in the environment variables.')

        prompt, model, system_instruction = read_prompt_request(load_body, config)
        payload = build_payload(prompt, system_instruction)

        reply = call_gemini(payload, model, config, session=session)
        text = translate_reply(reply)

        logger.info(f"Gemini model {model} returned {len(text)} characters")
        return _response(200, {'text': text}, config)

    except ClientError as e:
        logger.warning(f"Rejected request: {e.detail}")
        return error_response(e, config)
    except EmptyResponseError as e:
        e.detail = redact(e.detail, config.api_key)
        logger.warning(f"Empty Gemini response: {e.detail}")
        return error_response(e, config)
    except ProxyError as e:
        e.detail = redact(e.detail, config.api_key)
        logger.error(f"{e.marker}: {e.detail}")
        return error_response(e, config)
    except requests.exceptions.Timeout as e:
        logger.error(f"Gemini API timed out after {config.timeout}s: {redact(str(e), config.api_key)}")
        return error_response(TransportError(GENERIC_DETAIL), config)
    except Exception as e:
        logger.error(f"Gemini proxy error: {redact(repr(e), config.api_key)}")
        return error_response(TransportError(GENERIC_DETAIL), config)


def handler(request):
    logger.info("Starting Gemini proxy request")
    return proxy_request(request.method, request.get_json)


def _lambda_method(event):
    if event.get('httpMethod'):
        return event['httpMethod']
    http = (event.get('requestContext') or {}).get('http') or {}
    return http.get('method')


def lambda_handler(event, context):
    logger.info("Starting Gemini proxy request")

    def load_body():
        raw = event.get('body')
        if raw is None or isinstance(raw, dict):
            return raw
        if event.get('isBase64Encoded'):
            raw = base64.b64decode(raw).decode('utf-8')
        return json.loads(raw)

    return proxy_request(_lambda_method(event), load_body)

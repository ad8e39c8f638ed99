class ProxyError(Exception):
    """Base for every failure the proxy reports to its caller.

    Subclasses fix the HTTP status and the ``kind`` marker; ``error`` is a
    short summary and ``detail`` the longer explanation shown to the client.
    """

    status = 500
    kind = 'PROXY_ERROR'
    error = 'Internal server error while processing the request.'

    def __init__(self, detail, status=None, error=None):
        super().__init__(detail)
        self.detail = detail
        if status is not None:
            self.status = status
        if error is not None:
            self.error = error

    @property
    def marker(self):
        return f"{self.status} - {self.kind}"

    def to_body(self):
        return {
            'error': self.error,
            'proxyError': self.marker,
            'detail': self.detail,
        }


class ClientError(ProxyError):
    status = 400
    kind = 'BAD_REQUEST'
    error = 'Invalid request.'


class MethodNotAllowedError(ClientError):
    status = 405
    kind = 'METHOD_NOT_ALLOWED'
    error = 'Method Not Allowed, only POST is accepted.'


class ConfigurationError(ProxyError):
    kind = 'CONFIG_ERROR'
    error = 'Server configuration error.'


class UpstreamError(ProxyError):
    kind = 'API_CALL_FAILED'
    error = 'Error calling the Gemini API. Check limits, permissions, or whether the API key is valid.'


class EmptyResponseError(UpstreamError):
    status = 502
    kind = 'EMPTY_RESPONSE'
    error = 'The Gemini API returned no generated text.'


class TransportError(ProxyError):
    kind = 'PROXY_ERROR'


def redact(text, secret):
    if not secret or not text:
        return text
    return str(text).replace(secret, '***')

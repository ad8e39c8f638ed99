import json

API_KEY = 'test-secret-key-123'


class FakeRequest:
    def __init__(self, method='POST', body=None, raw=None):
        self.method = method
        self._body = body
        self._raw = raw

    def get_json(self):
        if self._raw is not None:
            return json.loads(self._raw)
        return self._body


class FakeResponse:
    def __init__(self, status_code=200, data=None, text=None):
        self.status_code = status_code
        self._data = data
        self.text = text if text is not None else (json.dumps(data) if data is not None else '')

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._data is None:
            raise ValueError('No JSON object could be decoded')
        return self._data


class FakeSession:
    """Stands in for ``requests``: records calls, returns or raises a canned outcome."""

    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.exc is not None:
            raise self.exc
        return self.response


def gemini_success(*texts):
    return {
        'candidates': [
            {
                'content': {'role': 'model', 'parts': [{'text': t} for t in texts]},
                'finishReason': 'STOP',
            }
        ]
    }


def decode(response):
    return response['statusCode'], json.loads(response['body'])

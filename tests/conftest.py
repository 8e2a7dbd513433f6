import threading

import pytest

from reqdav.protocol import DAVResponse

CHALLENGE = (
    'Digest realm="testrealm@host.com", qop="auth,auth-int", '
    'nonce="dcd98b7102dd2f0e8b11d0f600bfb0c093", '
    'opaque="5ccc069c403ebaf9f0171e9517f40e41"'
)


class FakeTransport:
    """
    Records every request and answers from a list of canned responses.
    When the list runs out, the last response is repeated.
    """

    def __init__(self, *responses):
        self.responses = list(responses) or [DAVResponse(status=200, headers={})]
        self.requests = []
        self.closed = False
        self._lock = threading.Lock()

    def execute(self, request):
        with self._lock:
            self.requests.append(request)
            if len(self.responses) > 1:
                return self.responses.pop(0)
            return self.responses[0]

    def close(self):
        self.closed = True


def challenge_response(header=CHALLENGE):
    return DAVResponse(status=401, headers={"WWW-Authenticate": header})


@pytest.fixture
def transport():
    return FakeTransport()

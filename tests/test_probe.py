import asyncio

import httpx

from dossier.citations.probe import HttpxProbe, Probe


def probe_with(handler):
    return HttpxProbe(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def test_any_response_is_reachable():
    def handler(request):
        assert request.method == "HEAD"
        return httpx.Response(404)

    assert asyncio.run(probe_with(handler).check("https://gone.example.com")) is True


def test_network_failure_is_unreachable():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    assert asyncio.run(probe_with(handler).check("https://down.example.com")) is False


def test_timeout_is_unreachable():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    assert asyncio.run(probe_with(handler).check("https://slow.example.com")) is False


def test_satisfies_protocol():
    assert isinstance(HttpxProbe(), Probe)

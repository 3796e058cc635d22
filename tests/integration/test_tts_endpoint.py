from dataclasses import replace

import pytest

from tests.fixtures.responses import ELEVENLABS_AUDIO, ELEVENLABS_ERROR_RESPONSE


@pytest.mark.parametrize("path", ["/tts", "/elevenlabs-tts"])
def test_tts_returns_audio_body(app_client, upstream, path):
    upstream.respond("api.elevenlabs.io", content=ELEVENLABS_AUDIO, headers={"Content-Type": "audio/mpeg"})

    response = app_client.post(path, json={"text": "Hello there"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "audio/mpeg"
    assert response.content == ELEVENLABS_AUDIO


@pytest.mark.parametrize("body", [{}, {"text": ""}, {"text": "   "}])
def test_tts_without_text_returns_400(app_client, upstream, body):
    response = app_client.post("/tts", json=body)

    assert response.status_code == 400
    assert "error" in response.json()
    assert upstream.requests == []


def test_tts_without_credentials_returns_500(client_factory, settings, upstream):
    client = client_factory(replace(settings, ELEVENLABS_API_KEY=""))

    response = client.post("/tts", json={"text": "Hello"})

    assert response.status_code == 500
    assert response.json() == {"error": "Server configuration error: ElevenLabs API key is missing."}
    assert upstream.requests == []


def test_tts_upstream_error_extracts_message(app_client, upstream):
    upstream.respond("api.elevenlabs.io", status_code=401, json=ELEVENLABS_ERROR_RESPONSE)

    response = app_client.post("/tts", json={"text": "Hello"})

    assert response.status_code == 401
    assert response.json()["message"] == "This request exceeds your quota."
    assert response.json()["details"] == ELEVENLABS_ERROR_RESPONSE


def test_tts_upstream_error_passes_raw_body_through(app_client, upstream):
    upstream.respond("api.elevenlabs.io", status_code=503, content=b"Service Unavailable")

    response = app_client.post("/tts", json={"text": "Hello"})

    assert response.status_code == 503
    assert response.json() == {"error": "Failed to communicate with ElevenLabs API", "details": "Service Unavailable"}

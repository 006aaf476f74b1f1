"""Tests for the transcription and analysis HTTP clients."""

from unittest.mock import MagicMock, patch

import requests

from app.adapters.analysis import AnalysisClient
from app.adapters.transcription import TranscriptionClient


def response(status_code=200, content=b"", json_data=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.content = content
    resp.text = ""
    resp.json.return_value = json_data
    return resp


def test_transcription_disabled_without_url():
    client = TranscriptionClient(api_url="")
    assert client.enabled is False
    assert client.transcribe("https://files.example/a.ogg") is None


@patch("app.adapters.transcription.requests")
def test_transcription_returns_text(mock_requests):
    mock_requests.RequestException = requests.RequestException
    mock_requests.get.return_value = response(content=b"OggS")
    mock_requests.post.return_value = response(json_data={"text": " hello \n"})
    client = TranscriptionClient(api_url="https://stt.example/v1/audio/transcriptions", api_key="k")

    assert client.transcribe("https://files.example/a.ogg", "voice.ogg") == "hello"
    _, kwargs = mock_requests.post.call_args
    assert kwargs["headers"] == {"Authorization": "Bearer k"}
    assert kwargs["files"]["file"] == ("voice.ogg", b"OggS")


@patch("app.adapters.transcription.requests")
def test_transcription_download_failure(mock_requests):
    mock_requests.RequestException = requests.RequestException
    mock_requests.get.side_effect = requests.ConnectionError("refused")
    client = TranscriptionClient(api_url="https://stt.example")
    assert client.transcribe("https://files.example/a.ogg") is None
    mock_requests.post.assert_not_called()


@patch("app.adapters.transcription.requests")
def test_transcription_service_error(mock_requests):
    mock_requests.RequestException = requests.RequestException
    mock_requests.get.return_value = response(content=b"OggS")
    mock_requests.post.return_value = response(status_code=500)
    client = TranscriptionClient(api_url="https://stt.example")
    assert client.transcribe("https://files.example/a.ogg") is None


def test_analysis_not_configured():
    assert AnalysisClient(api_url="").submit({"message_id": "1"}) is None


@patch("app.adapters.analysis.requests")
def test_analysis_posts_payload(mock_requests):
    mock_requests.RequestException = requests.RequestException
    mock_requests.post.return_value = response(status_code=202)
    client = AnalysisClient(api_url="https://ai.example/analyze", timeout_seconds=5)

    assert client.submit({"message_id": "1", "text": "hi"}) == 202
    mock_requests.post.assert_called_once_with(
        "https://ai.example/analyze",
        json={"message_id": "1", "text": "hi"},
        timeout=5,
    )


@patch("app.adapters.analysis.requests")
def test_analysis_failure_is_logged(mock_requests):
    mock_requests.RequestException = requests.RequestException
    mock_requests.post.side_effect = requests.Timeout("slow")
    assert AnalysisClient(api_url="https://ai.example").submit({"message_id": "1"}) is None

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import httpx
import openai
import pytest

from audioquiz.errors import EmptyTranscriptionError, UnsupportedAudioFormatError, UpstreamError
from audioquiz.services.intake import UploadedAudio
from audioquiz.services.transcription_service import Transcriber

REQUEST = httpx.Request("POST", "https://api.openai.com/v1/audio/transcriptions")


class FakeTranscriptions:
    def __init__(self, result=None, error: Exception | None = None):
        self.result = result
        self.error = error
        self.calls: list[dict] = []

    def create(self, **kwargs):
        kwargs["payload"] = kwargs["file"].read()
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.result


def make_client(result=None, error: Exception | None = None):
    transcriptions = FakeTranscriptions(result, error)
    return SimpleNamespace(audio=SimpleNamespace(transcriptions=transcriptions)), transcriptions


@pytest.fixture()
def stored_audio(tmp_path: Path) -> UploadedAudio:
    path = tmp_path / "clip.wav"
    path.write_bytes(b"RIFF0000WAVEfmt ")
    return UploadedAudio(path=str(path), content_type="audio/wav", size_bytes=16, filename="clip.wav")


def test_plain_text_response_is_stripped(stored_audio: UploadedAudio) -> None:
    client, transcriptions = make_client("  Photosynthesis converts light.\n")

    transcript = Transcriber(client, model="whisper-1").transcribe(stored_audio)

    assert transcript == "Photosynthesis converts light."
    call = transcriptions.calls[0]
    assert call["model"] == "whisper-1"
    assert call["response_format"] == "text"
    assert call["payload"] == b"RIFF0000WAVEfmt "


def test_structured_response_text_is_used(stored_audio: UploadedAudio) -> None:
    client, _ = make_client(SimpleNamespace(text="Cells divide by mitosis."))

    assert Transcriber(client).transcribe(stored_audio) == "Cells divide by mitosis."


@pytest.mark.parametrize("result", ["", "   \n", None, SimpleNamespace(text="")])
def test_empty_transcript_raises(stored_audio: UploadedAudio, result) -> None:
    client, _ = make_client(result)

    with pytest.raises(EmptyTranscriptionError):
        Transcriber(client).transcribe(stored_audio)


def test_rejected_format_maps_to_unsupported_audio(stored_audio: UploadedAudio) -> None:
    error = openai.BadRequestError(
        "Invalid file format.",
        response=httpx.Response(400, request=REQUEST),
        body=None,
    )
    client, _ = make_client(error=error)

    with pytest.raises(UnsupportedAudioFormatError) as excinfo:
        Transcriber(client).transcribe(stored_audio)

    assert excinfo.value.status_code == 415


@pytest.mark.parametrize(
    "error",
    [
        openai.APIConnectionError(request=REQUEST),
        openai.AuthenticationError(
            "Incorrect API key provided",
            response=httpx.Response(401, request=REQUEST),
            body=None,
        ),
        openai.InternalServerError(
            "Server error",
            response=httpx.Response(500, request=REQUEST),
            body=None,
        ),
    ],
)
def test_provider_failures_map_to_upstream_error(stored_audio: UploadedAudio, error) -> None:
    client, _ = make_client(error=error)

    with pytest.raises(UpstreamError) as excinfo:
        Transcriber(client).transcribe(stored_audio)

    assert excinfo.value.status_code == 500
    assert "API key" not in excinfo.value.message

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
for source_dir in (ROOT / "Backend", ROOT / "Frontend"):
    if str(source_dir) not in sys.path:
        sys.path.insert(0, str(source_dir))

from audioquiz.services.prompts import get_prompt_version
from audioquiz.utils.config import Settings

TRANSCRIPT = "Photosynthesis converts light into chemical energy."


def make_quiz(count: int = 12, summary: str = "Plants turn sunlight into sugar.") -> dict:
    return {
        "summary": summary,
        "quiz": [
            {
                "question": f"Question {index + 1} about photosynthesis?",
                "choices": ["Light", "Water", "Soil", "Wind"],
                "answerIndex": index % 4,
                "explanation": "Chlorophyll absorbs light.",
            }
            for index in range(count)
        ],
    }


class FakeTranscriber:
    def __init__(self, text: str = TRANSCRIPT, error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls: list[str] = []
        self.file_existed: list[bool] = []

    def transcribe(self, audio) -> str:
        self.calls.append(audio.path)
        self.file_existed.append(os.path.exists(audio.path))
        if self.error is not None:
            raise self.error
        if not self.text.strip():
            from audioquiz.errors import EmptyTranscriptionError

            raise EmptyTranscriptionError()
        return self.text


class FakeSynthesizer:
    def __init__(self, raw: str | None = None, error: Exception | None = None, version: str = "v2"):
        self.raw = raw if raw is not None else json.dumps(make_quiz(12))
        self.error = error
        self.prompt_version = get_prompt_version(version)
        self.transcripts: list[str] = []

    def generate(self, transcript: str) -> str:
        self.transcripts.append(transcript)
        if self.error is not None:
            raise self.error
        return self.raw


@pytest.fixture()
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture()
def settings(upload_dir: Path) -> Settings:
    return Settings(upload_dir=str(upload_dir), prompt_version="v2", log_level="DEBUG")


def leftover_files(directory: Path) -> list[Path]:
    if not directory.exists():
        return []
    return list(directory.iterdir())

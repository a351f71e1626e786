import logging

import openai

from audioquiz.errors import EmptyTranscriptionError, UnsupportedAudioFormatError, UpstreamError

logger = logging.getLogger(__name__)


class Transcriber:
    """Speech-to-text through the OpenAI audio transcription endpoint.

    The client is injected so tests can hand in a fake with the same
    ``audio.transcriptions.create`` surface.
    """

    def __init__(self, client, model: str = "whisper-1"):
        self.client = client
        self.model = model

    @classmethod
    def from_settings(cls, settings) -> "Transcriber":
        client = openai.OpenAI(api_key=settings.openai_api_key) if settings.openai_api_key else openai.OpenAI()
        return cls(client, model=settings.transcription_model)

    def transcribe(self, audio) -> str:
        """Return the transcript text for a stored upload"""
        try:
            with open(audio.path, "rb") as audio_file:
                response = self.client.audio.transcriptions.create(
                    model=self.model,
                    file=audio_file,
                    response_format="text",
                    temperature=0,
                )
        except (openai.BadRequestError, openai.UnprocessableEntityError) as e:
            logger.error(f"Transcription provider rejected {audio.filename}: {str(e)}")
            raise UnsupportedAudioFormatError() from e
        except openai.OpenAIError as e:
            logger.error(f"Transcription request failed: {str(e)}")
            raise UpstreamError() from e

        transcript = self._text_of(response).strip()
        if not transcript:
            raise EmptyTranscriptionError()
        logger.info(f"Transcribed {audio.filename}: {len(transcript)} characters")
        return transcript

    @staticmethod
    def _text_of(response) -> str:
        # response_format="text" yields a str; the json formats yield an object with .text
        if response is None:
            return ""
        if isinstance(response, str):
            return response
        text = getattr(response, "text", None)
        if text is None and isinstance(response, dict):
            text = response.get("text")
        return str(text or "")

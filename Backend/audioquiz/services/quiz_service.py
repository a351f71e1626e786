import json
import logging

from langchain_core.output_parsers import StrOutputParser
from langchain_google_genai import ChatGoogleGenerativeAI
from pydantic import ValidationError

from audioquiz.errors import SynthesisParseError, SynthesisShapeError, UpstreamError
from audioquiz.schemas import QuizPayload
from audioquiz.services.prompts import PromptVersion, get_prompt_version

logger = logging.getLogger(__name__)

LOGGED_RESPONSE_CHARS = 500


class QuizSynthesizer:
    """Turns a transcript into the chat model's raw summary+quiz text.

    Structure is not checked here; see ``recover_quiz``.
    """

    def __init__(self, llm, prompt_version: PromptVersion):
        self.llm = llm
        self.prompt_version = prompt_version
        self.chain = prompt_version.template | llm | StrOutputParser()

    @classmethod
    def from_settings(cls, settings) -> "QuizSynthesizer":
        version = get_prompt_version(settings.prompt_version)
        kwargs = {"model": settings.llm_model, "temperature": settings.llm_temperature}
        if settings.google_api_key:
            kwargs["google_api_key"] = settings.google_api_key
        return cls(ChatGoogleGenerativeAI(**kwargs), version)

    def generate(self, transcript: str) -> str:
        try:
            raw = self.chain.invoke({"transcript": transcript})
        except Exception as e:
            logger.error(f"Quiz generation request failed: {str(e)}")
            raise UpstreamError() from e
        return (raw or "").strip()


def _loads(text: str):
    try:
        return True, json.loads(text)
    except ValueError:
        return False, None


def extract_json(text: str):
    """Parse the model's reply, salvaging a JSON object wrapped in extra prose.

    Only one salvage attempt is made: the span from the first ``{`` to the
    last ``}``. No bracket balancing or other repair is tried.
    """
    text = (text or "").strip()
    ok, value = _loads(text)
    if ok:
        return value

    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        ok, value = _loads(text[start:end + 1])
        if ok:
            logger.warning("Model wrapped its JSON in extra text; salvaged embedded object")
            return value

    logger.error(f"Failed to extract JSON from: {text[:LOGGED_RESPONSE_CHARS]}")
    raise SynthesisParseError()


def validate_quiz(data, prompt_version: PromptVersion) -> QuizPayload:
    """Check the parsed reply against the quiz schema and the version's question bounds"""
    if not isinstance(data, dict):
        logger.error(f"Quiz payload is a {type(data).__name__}, expected an object")
        raise SynthesisShapeError()

    try:
        payload = QuizPayload.model_validate(data)
    except ValidationError as e:
        logger.error(f"Quiz validation failed: {e}")
        raise SynthesisShapeError() from e

    count = len(payload.quiz)
    if count < prompt_version.min_questions:
        logger.error(
            f"Quiz has {count} questions, prompt {prompt_version.name} requires at least "
            f"{prompt_version.min_questions}"
        )
        raise SynthesisShapeError()
    if count > prompt_version.max_questions:
        logger.warning(f"Quiz has {count} questions, keeping the first {prompt_version.max_questions}")
        payload.quiz = payload.quiz[:prompt_version.max_questions]
    return payload


def recover_quiz(raw: str, prompt_version: PromptVersion) -> QuizPayload:
    return validate_quiz(extract_json(raw), prompt_version)

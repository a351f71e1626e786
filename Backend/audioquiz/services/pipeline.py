import enum
import logging
import uuid

from audioquiz.schemas import QuizPayload
from audioquiz.services.intake import AudioIntake
from audioquiz.services.quiz_service import recover_quiz

logger = logging.getLogger(__name__)


class Stage(str, enum.Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    TRANSCRIBING = "transcribing"
    SYNTHESIZING = "synthesizing"
    RECOVERING = "recovering"
    RESPONDING = "responding"


class QuizPipeline:
    """Upload -> transcript -> summary+quiz, one request at a time.

    Stages run strictly in order and any of them may fail. The stored upload
    is discarded exactly once when the run ends, whatever the outcome.
    """

    def __init__(self, intake: AudioIntake, transcriber, synthesizer):
        self.intake = intake
        self.transcriber = transcriber
        self.synthesizer = synthesizer

    def run(self, upload) -> QuizPayload:
        request_id = uuid.uuid4().hex[:8]
        stage = Stage.RECEIVED
        audio = None
        logger.info(f"[{request_id}] {stage.value}")
        try:
            audio = self.intake.accept(upload)
            stage = self._advance(request_id, Stage.VALIDATED)

            stage = self._advance(request_id, Stage.TRANSCRIBING)
            transcript = self.transcriber.transcribe(audio)

            stage = self._advance(request_id, Stage.SYNTHESIZING)
            raw = self.synthesizer.generate(transcript)

            stage = self._advance(request_id, Stage.RECOVERING)
            payload = recover_quiz(raw, self.synthesizer.prompt_version)

            self._advance(request_id, Stage.RESPONDING)
            return payload
        except Exception as e:
            logger.warning(f"[{request_id}] failed during {stage.value}: {type(e).__name__}")
            raise
        finally:
            if audio is not None:
                audio.discard()

    @staticmethod
    def _advance(request_id: str, stage: Stage) -> Stage:
        logger.info(f"[{request_id}] {stage.value}")
        return stage

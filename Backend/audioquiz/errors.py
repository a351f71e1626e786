"""Error taxonomy for the upload -> transcribe -> quiz pipeline.

Every error carries the HTTP status it maps to and a single-line message that
is safe to show to the client. Provider details belong in the server log.
"""


class AudioQuizError(Exception):
    status_code = 500
    message = "Server error while processing audio."

    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)


class ConfigurationError(AudioQuizError):
    """Raised while building the service, never mapped to a response."""


# Intake

class IntakeError(AudioQuizError):
    status_code = 400
    message = "Invalid audio upload."


class MissingFileError(IntakeError):
    message = "No audio file received. Attach one under the 'audio' field."


class UnsupportedMediaError(IntakeError):
    status_code = 415
    message = "Unsupported audio type. Try mp3, wav, m4a, webm, ogg or flac."


class FileTooLargeError(IntakeError):
    message = "Audio file is too large."


# Transcription

class TranscriptionError(AudioQuizError):
    status_code = 400
    message = "Transcription failed."


class EmptyTranscriptionError(TranscriptionError):
    message = "Transcription returned empty text. Try a clearer/longer clip."


class UnsupportedAudioFormatError(TranscriptionError):
    status_code = 415
    message = "The transcription service could not read this audio format. Try mp3, wav or m4a."


# Synthesis

class SynthesisParseError(AudioQuizError):
    status_code = 502
    message = "AI returned an invalid response. Please try again."


class SynthesisShapeError(AudioQuizError):
    status_code = 502
    message = "AI returned malformed payload. Please try a different clip."


class UpstreamError(AudioQuizError):
    status_code = 500
    message = "Processing failed while contacting the AI provider."


class UnknownError(AudioQuizError):
    status_code = 500

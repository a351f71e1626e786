from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

CHOICES_PER_QUESTION = 4
CHOICE_LETTERS = "ABCD"


class QuizQuestion(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: str = Field(validation_alias=AliasChoices("question", "prompt", "text"))
    choices: List[str] = Field(validation_alias=AliasChoices("choices", "options"))
    answerIndex: int = Field(
        validation_alias=AliasChoices("answerIndex", "correctIndex", "correctChoiceIndex")
    )
    explanation: Optional[str] = None

    @field_validator("question")
    @classmethod
    def question_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("question must not be empty")
        return value

    @field_validator("choices", mode="before")
    @classmethod
    def choices_from_mapping(cls, value):
        # Older prompts asked for {"A": "...", "B": "..."}
        if isinstance(value, dict):
            return [value[key] for key in sorted(value)]
        return value

    @field_validator("choices")
    @classmethod
    def four_choices(cls, value: List[str]) -> List[str]:
        value = [choice.strip() for choice in value]
        if len(value) != CHOICES_PER_QUESTION:
            raise ValueError(f"expected exactly {CHOICES_PER_QUESTION} choices, got {len(value)}")
        if not all(value):
            raise ValueError("choices must not be empty")
        return value

    @field_validator("answerIndex", mode="before")
    @classmethod
    def answer_from_letter(cls, value):
        if isinstance(value, str):
            letter = value.strip().upper()
            if len(letter) == 1 and letter in CHOICE_LETTERS:
                return CHOICE_LETTERS.index(letter)
        return value

    @model_validator(mode="after")
    def answer_in_range(self):
        if not 0 <= self.answerIndex < len(self.choices):
            raise ValueError(f"answerIndex {self.answerIndex} is not a valid choice index")
        return self


class QuizPayload(BaseModel):
    """Summary plus quiz as returned to the client"""
    model_config = ConfigDict(populate_by_name=True)

    summary: str
    quiz: List[QuizQuestion] = Field(validation_alias=AliasChoices("quiz", "questions"))

    @field_validator("summary")
    @classmethod
    def summary_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("summary must not be empty")
        return value


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    ok: bool = True


class PromptVersionInfo(BaseModel):
    name: str
    summary_sentences: List[int]
    min_questions: int
    max_questions: int

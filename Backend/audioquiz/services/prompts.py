from dataclasses import dataclass
from typing import Dict, Tuple

from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate

from audioquiz.errors import ConfigurationError

SYSTEM_MESSAGE = "Return STRICT JSON only. No prose."

# Literal JSON braces are doubled for the template engine
QUIZ_TEMPLATE = """
TRANSCRIPT:
{transcript}
---

Return STRICT JSON ONLY. No prose. Shape:

{{
  "summary": "<{summary_min}-{summary_max} sentence student-friendly summary>",
  "quiz": [
    {{
      "question": "<clear, single-concept MCQ>",
      "choices": ["A", "B", "C", "D"],
      "answerIndex": 0,
      "explanation": "<1-2 sentence why the correct answer is right>"
    }}
  ]
}}

Rules:
- {summary_min}-{summary_max} sentence summary.
- {min_questions}-{max_questions} multiple-choice questions.
- Exactly 4 choices per question; answerIndex is the 0-based index of the correct choice.
- Randomize correct answer positions.
- Use plain text only; avoid Markdown.
- Keep choices short and mutually exclusive.
"""


@dataclass(frozen=True)
class PromptVersion:
    name: str
    summary_sentences: Tuple[int, int]
    min_questions: int
    max_questions: int
    system_message: str = SYSTEM_MESSAGE
    template_text: str = QUIZ_TEMPLATE

    @property
    def template(self) -> ChatPromptTemplate:
        prompt = ChatPromptTemplate.from_messages(
            [("system", self.system_message), ("human", self.template_text)]
        )
        return prompt.partial(
            summary_min=str(self.summary_sentences[0]),
            summary_max=str(self.summary_sentences[1]),
            min_questions=str(self.min_questions),
            max_questions=str(self.max_questions),
        )

    def render(self, transcript: str) -> list[BaseMessage]:
        """Role-tagged messages sent to the chat model for ``transcript``"""
        return self.template.format_messages(transcript=transcript)

    def describe(self) -> dict:
        return {
            "name": self.name,
            "summary_sentences": list(self.summary_sentences),
            "min_questions": self.min_questions,
            "max_questions": self.max_questions,
        }


PROMPT_VERSIONS: Dict[str, PromptVersion] = {
    "v1": PromptVersion(name="v1", summary_sentences=(3, 5), min_questions=8, max_questions=10),
    "v2": PromptVersion(name="v2", summary_sentences=(5, 7), min_questions=12, max_questions=16),
}


def get_prompt_version(name: str) -> PromptVersion:
    try:
        return PROMPT_VERSIONS[name]
    except KeyError:
        known = ", ".join(sorted(PROMPT_VERSIONS))
        raise ConfigurationError(f"Unknown prompt version '{name}'. Known versions: {known}") from None

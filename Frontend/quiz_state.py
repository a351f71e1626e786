"""Session-state helpers for the quiz page, kept free of Streamlit calls"""

RADIO_PREFIX = "radio_"

SESSION_DEFAULTS = {
    "summary": "",
    "quiz": [],
    "quiz_submitted": False,
    "user_answers": {},
}


def init_session(state):
    for key, value in SESSION_DEFAULTS.items():
        if key not in state:
            state[key] = value.copy() if isinstance(value, (dict, list)) else value


def radio_key(number: int) -> str:
    return f"{RADIO_PREFIX}{number}"


def reset_quiz(state, summary="", quiz=None):
    """Load a new quiz and forget every answer picked for the previous one"""
    for key in [k for k in state.keys() if str(k).startswith(RADIO_PREFIX)]:
        del state[key]
    state["summary"] = summary
    state["quiz"] = quiz or []
    state["user_answers"] = {}
    state["quiz_submitted"] = False


def score(quiz, answers) -> int:
    return sum(1 for n, q in enumerate(quiz, start=1) if answers.get(n) == q["answerIndex"])

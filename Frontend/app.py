import streamlit as st
import requests
import os

from quiz_state import init_session, radio_key, reset_quiz, score

# Configuration
BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:10000")
AUDIO_TYPES = ["mp3", "m4a", "wav", "webm", "ogg", "oga", "flac", "mp4"]
LETTERS = "ABCD"
st.set_page_config(page_title="StudyBuddy", layout="wide")

init_session(st.session_state)

# UI Components
st.title("🎧 StudyBuddy")
st.subheader("Upload a lecture or meeting recording and test your knowledge")

# Sidebar for audio upload
with st.sidebar:
    st.header("Upload Recording")
    uploaded_file = st.file_uploader("Choose an audio file", type=AUDIO_TYPES, accept_multiple_files=False)

    if uploaded_file is not None and st.button("Analyze Recording"):
        with st.spinner("Transcribing and writing your quiz..."):
            try:
                response = requests.post(
                    f"{BACKEND_URL}/api/upload-audio",
                    files={"audio": (uploaded_file.name, uploaded_file.getvalue(), uploaded_file.type)},
                    timeout=300  # transcription of long clips is slow
                )
                if response.status_code == 200:
                    data = response.json()
                    reset_quiz(st.session_state, data.get("summary", ""), data.get("quiz", []))
                    st.success(f"Created {len(st.session_state.quiz)} questions!")
                else:
                    try:
                        message = response.json().get("error")
                    except ValueError:
                        message = None
                    st.error(message or f"Server error {response.status_code}")
            except requests.RequestException as e:
                st.error(f"Connection error: {str(e)}")

if st.session_state.quiz:
    summary_tab, quiz_tab = st.tabs(["Summary", "Quiz"])

    with summary_tab:
        st.header("Summary")
        st.write(st.session_state.summary)

    with quiz_tab:
        quiz = st.session_state.quiz
        st.header(f"Quiz ({len(quiz)} questions)")

        with st.form(key="quiz_form"):
            for number, q in enumerate(quiz, start=1):
                st.markdown(f"**Q{number}:** {q['question']}")
                choices = q["choices"]
                selected = st.radio(
                    f"Select answer for Q{number}:",
                    options=list(range(len(choices))),
                    format_func=lambda i, choices=choices: f"{LETTERS[i]}. {choices[i]}",
                    key=radio_key(number),
                    index=None,
                    label_visibility="collapsed",
                )
                st.session_state.user_answers[number] = selected

            submitted = st.form_submit_button("Submit Quiz")
            if submitted:
                st.session_state.quiz_submitted = True

        if st.session_state.quiz_submitted:
            answers = st.session_state.user_answers
            st.success(f"## Your Score: {score(quiz, answers)}/{len(quiz)}")

            with st.expander("Detailed Results"):
                for number, q in enumerate(quiz, start=1):
                    chosen = answers.get(number)
                    correct = q["answerIndex"]
                    status = "✅" if chosen == correct else "❌"
                    st.markdown(f"{status} **Question {number}:** {q['question']}")
                    st.markdown(f"- Your answer: **{LETTERS[chosen] if chosen is not None else '-'}**")
                    st.markdown(f"- Correct answer: **{LETTERS[correct]}. {q['choices'][correct]}**")
                    if q.get("explanation"):
                        st.markdown(f"- {q['explanation']}")
                    st.divider()

# Initial state message
if not st.session_state.quiz:
    st.info("🎙️ Please upload an audio recording to get started")

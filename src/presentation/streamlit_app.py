import logging

import streamlit as st

from src.application.intake_form import ClinicalIntakeForm
from src.application.session import SessionStateMachine
from src.application.use_cases import ComplicationAnalyzerUseCase, FluidClassifierUseCase
from src.infrastructure.config import Settings
from src.infrastructure.llm.mistral_client import MistralLLMAdapter
from src.presentation.screens import (
    close_scanner,
    show_camera_screen,
    show_home_screen,
    show_intake_screen,
    show_result_screen,
    show_upload_screen,
)


logger = logging.getLogger(__name__)


DISCLAIMER = (
    "⚕️ **DISCLAIMER:** This tool supports, but does not replace, clinical judgement. "
    "Assessments are generated by an AI model and may be wrong. "
    "Always follow your institution's IV therapy protocol."
)


def build_workflow(settings: Settings):
    llm = MistralLLMAdapter(settings=settings)
    machine = SessionStateMachine(ComplicationAnalyzerUseCase(llm, language=settings.response_language))
    form = ClinicalIntakeForm(
        FluidClassifierUseCase(llm, language=settings.response_language),
        on_cancel=machine.reset,
    )

    def _on_transition(session):
        if session.phase == "idle":
            form.clear()

    machine.subscribe(_on_transition)
    return machine, form


def _init_session_state(settings: Settings):
    if "machine" not in st.session_state:
        st.session_state.machine, st.session_state.form = build_workflow(settings)
    if "mode" not in st.session_state:
        st.session_state.mode = "home"
    if "scanner" not in st.session_state:
        st.session_state.scanner = None


def _require_mistral_key(settings: Settings) -> bool:
    if not settings.mistral_api_key:
        st.error(
            "❌ **Mistral API Key Missing**\n\n"
            "Add `MISTRAL_API_KEY` to `.streamlit/secrets.toml` or as an environment variable."
        )
        return False
    return True


def _render_sidebar(settings: Settings, machine: SessionStateMachine):
    st.sidebar.title("⚙️ Settings")
    st.sidebar.caption(f"**Model:** {settings.mistral_model}")
    st.sidebar.caption(f"**Phase:** {machine.phase}")
    st.sidebar.divider()

    if st.sidebar.button("🔄 New Scan", use_container_width=True):
        close_scanner()
        machine.reset()
        st.session_state.mode = "home"
        st.rerun()


def main():
    settings = Settings()
    logging.basicConfig(level=settings.log_level)

    st.set_page_config(
        page_title="IV Site Assessment",
        page_icon="💉",
        layout="centered",
    )

    if not _require_mistral_key(settings):
        st.stop()

    _init_session_state(settings)
    machine: SessionStateMachine = st.session_state.machine
    form: ClinicalIntakeForm = st.session_state.form
    _render_sidebar(settings, machine)

    st.markdown("# 💉 IV Site Assessment")
    st.info(DISCLAIMER)

    mode = st.session_state.mode
    if mode != "camera":
        close_scanner()

    if mode == "camera":
        show_camera_screen(machine, settings)
    elif mode == "upload":
        show_upload_screen(machine, settings)
    elif machine.phase == "idle":
        show_home_screen()
    elif machine.phase == "input_details":
        show_intake_screen(machine, form, settings)
    else:
        show_result_screen(machine)


if __name__ == "__main__":
    main()

"""Streamlit screens for capture, clinical intake and results."""
import asyncio

import streamlit as st

from src.application.intake_form import ClinicalIntakeForm
from src.application.schemas import ComplicationAssessment
from src.application.session import SessionStateMachine
from src.domain.errors import CameraUnavailable, InvalidInput
from src.domain.models import FluidCategory, SkinTemp
from src.domain.rules import PAIN_RANGE, SIZE_RANGE_CM
from src.infrastructure.camera.opencv_camera import open_camera
from src.infrastructure.camera.scanner import LiveScanner
from src.infrastructure.config import Settings
from src.infrastructure.media.image_utils import capture_from_file


FLUID_LABELS = {
    FluidCategory.NON_VESICANT: "Non-vesicant",
    FluidCategory.VESICANT: "Vesicant (high risk)",
    FluidCategory.UNSURE: "Unsure",
}


def close_scanner() -> None:
    """Release the camera if the scanning view is open. Safe to call on every rerun."""
    scanner = st.session_state.get("scanner")
    if scanner is not None:
        scanner.close()
        st.session_state.scanner = None


def show_home_screen() -> None:
    st.markdown("### Capture the IV site")
    st.caption("Detects phlebitis, infiltration and extravasation using INS clinical standards.")

    col1, col2 = st.columns([1, 1])
    with col1:
        if st.button("📷 Live camera", use_container_width=True):
            st.session_state.mode = "camera"
            st.rerun()
    with col2:
        if st.button("🖼️ Upload photo", use_container_width=True):
            st.session_state.mode = "upload"
            st.rerun()


def show_upload_screen(machine: SessionStateMachine, settings: Settings) -> None:
    st.markdown("### Upload a photo")
    source = st.radio("Source", ["Browser camera", "Photo file"], horizontal=True)
    if source == "Browser camera":
        uploaded = st.camera_input("Take a photo of the IV site")
    else:
        uploaded = st.file_uploader("Choose an image", type=None)

    if uploaded is not None:
        try:
            image = capture_from_file(uploaded, max_bytes=settings.max_upload_bytes)
        except InvalidInput as e:
            st.error(f"❌ {e}")
        else:
            machine.image_acquired(image)
            st.session_state.mode = "home"
            st.rerun()

    if st.button("Cancel", use_container_width=True):
        st.session_state.mode = "home"
        st.rerun()


def show_camera_screen(machine: SessionStateMachine, settings: Settings) -> None:
    st.markdown("### Live camera")

    def on_capture(image):
        machine.image_acquired(image)
        st.session_state.mode = "home"

    if st.session_state.get("scanner") is None:
        try:
            camera = open_camera(
                settings.camera_index,
                settings.camera_fallback_indices,
                jpeg_quality=settings.jpeg_quality,
            )
        except CameraUnavailable as e:
            st.error(f"❌ {e}")
            if st.button("Close camera", use_container_width=True):
                st.session_state.mode = "home"
                st.rerun()
            return
        st.session_state.scanner = LiveScanner(
            camera,
            on_capture=on_capture,
            is_busy=lambda: machine.is_analyzing,
            interval_s=settings.auto_capture_interval_s,
        )

    scanner: LiveScanner = st.session_state.scanner

    @st.fragment(run_every=settings.preview_interval_s)
    def _live_preview():
        frame = scanner.preview()
        if frame is None:
            st.caption("Waiting for camera...")
        else:
            st.image(frame.data, caption="Live view", use_container_width=True)
    _live_preview()

    auto = st.toggle("Auto-scan", value=scanner.auto_mode)
    if auto != scanner.auto_mode:
        scanner.set_auto_mode(auto, background=False)

    if scanner.auto_mode:
        @st.fragment(run_every=settings.auto_capture_interval_s)
        def _auto_sample():
            if scanner.sampler.tick() is not None:
                close_scanner()
                st.rerun(scope="app")
        _auto_sample()

    col1, col2 = st.columns([1, 1])
    with col1:
        if st.button("📸 Capture", use_container_width=True, disabled=machine.is_analyzing):
            if scanner.shutter() is not None:
                close_scanner()
                st.rerun()
            else:
                st.warning("Camera is not ready yet, try again.")
    with col2:
        if st.button("✖ Close camera", use_container_width=True):
            close_scanner()
            st.session_state.mode = "home"
            st.rerun()


def show_intake_screen(machine: SessionStateMachine, form: ClinicalIntakeForm, settings: Settings) -> None:
    st.markdown("### Clinical details")
    session = machine.session
    st.image(session.image.data, caption="IV site", use_container_width=True)

    drug_name = st.text_input("Drug / IV fluid", value=form.draft.drug_name, placeholder="e.g. 5% D/N/2")
    if drug_name != form.draft.drug_name:
        form.set_drug_name(drug_name)

    col1, col2 = st.columns([1, 1])
    with col1:
        if st.button("🔎 Check drug", use_container_width=True, disabled=not form.draft.drug_name):
            with st.spinner("Classifying..."):
                asyncio.run(form.lookup_drug_name())
            st.rerun()
    with col2:
        label = st.file_uploader("Scan drug label", key="label_upload")
        if label is not None and st.button("Classify label", use_container_width=True):
            try:
                label_image = capture_from_file(label, max_bytes=settings.max_upload_bytes, source="label")
            except InvalidInput as e:
                st.error(f"❌ {e}")
            else:
                with st.spinner("Reading label..."):
                    asyncio.run(form.scan_label(label_image))
                st.rerun()

    categories = list(FLUID_LABELS.keys())
    category = st.radio(
        "Fluid category",
        categories,
        index=categories.index(form.draft.fluid_category),
        format_func=lambda c: FLUID_LABELS[c],
        horizontal=True,
    )
    form.set_fluid_category(category)
    if form.advisory_reason:
        st.info(f"AI note: {form.advisory_reason}")

    form.set_pain_level(st.slider("Pain score", PAIN_RANGE[0], PAIN_RANGE[1], form.draft.pain_level))
    form.set_symptom_size(st.slider(
        "Affected area (cm)",
        SIZE_RANGE_CM[0],
        SIZE_RANGE_CM[1],
        float(form.draft.symptom_size_cm),
        step=0.5,
    ))
    temps = list(SkinTemp)
    form.set_skin_temp(st.radio(
        "Skin temperature",
        temps,
        index=temps.index(form.draft.skin_temp),
        format_func=lambda t: t.value.title(),
        horizontal=True,
    ))
    form.set_hardness(st.checkbox("Palpable venous cord", value=form.draft.hardness))

    col1, col2 = st.columns([1, 1])
    with col1:
        if st.button("Analyze ➜", use_container_width=True, type="primary"):
            try:
                inputs = form.submit()
            except InvalidInput as e:
                st.error(f"❌ {e}")
                return
            with st.spinner("🔬 Analyzing IV site..."):
                asyncio.run(machine.submit(inputs))
            st.rerun()
    with col2:
        if st.button("Cancel", use_container_width=True):
            form.cancel()
            st.rerun()


def format_assessment(result: ComplicationAssessment) -> str:
    lines = [
        f"## {result.status}",
        f"**Severity:** {result.severity}",
        "",
        "### 👁️ Visual evidence",
        result.visual_evidence,
        "",
        "### 🩺 Nursing intervention",
        result.nursing_intervention,
        "",
        "### ⚠️ Safety warning",
        result.safety_warning,
    ]
    return "\n".join(lines)


def show_result_screen(machine: SessionStateMachine) -> None:
    session = machine.session
    if session.phase == "success":
        st.markdown(format_assessment(session.result))
        if st.button("New scan", use_container_width=True):
            machine.reset()
            st.rerun()
    elif session.phase == "error":
        st.error(session.message)
        col1, col2, col3 = st.columns([1, 1, 1])
        with col1:
            if st.button("Try again", use_container_width=True):
                with st.spinner("🔬 Analyzing IV site..."):
                    asyncio.run(machine.retry())
                st.rerun()
        with col2:
            if st.button("Edit details", use_container_width=True):
                machine.edit_details()
                st.rerun()
        with col3:
            if st.button("Start over", use_container_width=True):
                machine.reset()
                st.rerun()
    elif session.phase == "analyzing":
        st.info("🔬 Analysis in progress...")

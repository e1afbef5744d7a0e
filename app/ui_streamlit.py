# app/ui_streamlit.py
import sys
import os

# Resolve project root directory dynamically
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.append(PROJECT_ROOT)

import uuid
import streamlit as st
from core.errors import InterviewError
from core.recommendations import generate_inventory_recommendations
from core.report import export_pdf
from core.sessions import store
from core.state import INTRO_MESSAGE


# --- Initialize Session State ---
# one interview per browser session, keyed in the shared store
if "session_id" not in st.session_state:
    st.session_state.session_id = uuid.uuid4().hex
    store.reset(st.session_state.session_id)

if "summary" not in st.session_state:
    st.session_state.summary = None

if "recommendations" not in st.session_state:
    st.session_state.recommendations = None

sid = st.session_state.session_id
state = store.get(sid)


st.title("Entrevista de actividad comercial")
st.caption(INTRO_MESSAGE)

st.progress(
    (state.total_questions if state.finished else state.current_question_index) / state.total_questions,
    text=f"Pregunta {min(state.current_question_index + 1, state.total_questions)} de {state.total_questions}",
)

# --- Conversation so far ---
for turn in state.transcript:
    with st.chat_message("user" if turn["role"] == "user" else "assistant"):
        st.markdown(turn["content"])

# --- Current Prompt + Answer Box ---
if not state.finished:
    st.info(f"Pregunta {state.current_question_index + 1}: {state.current_question}")

    answer = st.chat_input("Escribe tu respuesta")
    if answer:
        try:
            with st.spinner("Validando respuesta..."):
                store.submit(answer, sid)
        except InterviewError as e:
            st.warning(str(e))
        st.rerun()
else:
    st.success("Entrevista completada.")


col1, col2, col3 = st.columns(3)

# --- Summary ---
with col1:
    if st.button("Resumen", disabled=not state.transcript):
        try:
            with st.spinner("Generando resumen..."):
                st.session_state.summary = store.summarize(sid)
        except InterviewError as e:
            st.error(f"No se pudo generar el resumen: {e}")

# --- Purchase recommendations ---
with col2:
    if st.button("Recomendaciones de compra"):
        try:
            with st.spinner("Analizando inventario..."):
                st.session_state.recommendations = generate_inventory_recommendations()
        except InterviewError as e:
            st.error(f"No se pudieron generar recomendaciones: {e}")

# --- Start over ---
with col3:
    if st.button("Reiniciar"):
        store.reset(sid)
        st.session_state.summary = None
        st.session_state.recommendations = None
        st.rerun()

if st.session_state.summary:
    st.subheader("Resumen")
    st.markdown(st.session_state.summary)

recs = st.session_state.recommendations
if recs:
    st.subheader("Recomendaciones de compra")
    if recs.get("message"):
        st.info(recs["message"])
    if recs.get("recommendations"):
        st.dataframe(recs["recommendations"], use_container_width=True)

# ---- PDF EXPORT BUTTON ----
if state.transcript and st.button("Generar reporte PDF"):
    pdf_path = export_pdf(
        state,
        summary=st.session_state.summary,
        recommendations=(recs or {}).get("recommendations"),
        filename=f"business_report_{sid[:8]}.pdf",
    )
    with open(pdf_path, "rb") as f:
        st.download_button(
            label="Descargar PDF",
            data=f,
            file_name="business_report.pdf",
            mime="application/pdf",
        )

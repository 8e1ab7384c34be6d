# app.py
import json

import pandas as pd
import streamlit as st

from timetable_ai.config import GAConfig
from timetable_ai.data_loader import (
    ROOM_COLUMNS, SUBJECT_COLUMNS, load_data, rooms_from_frame, subjects_from_frame,
)
from timetable_ai.encoding import (
    build_timetable_document, schedule_to_frame, schedule_to_grid_frame,
)
from timetable_ai.evaluation import evaluate, unplaced_hours
from timetable_ai.ga import GeneticSolver
from timetable_ai.model import LUNCH_BREAK, Assignment, InvalidInput

# --- CONFIGURACIÓN DE PÁGINA ---
st.set_page_config(page_title="Generador de Horarios", layout="wide", initial_sidebar_state="expanded")

# --- ESTILOS CSS ---
st.markdown("""
    <style>
    .stButton>button {
        width: 100%;
        background-color: #ff4b4b;
        color: white;
        font-weight: bold;
        height: 50px;
    }
    .schedule-table {
        width: 100%;
        border-collapse: collapse;
        font-family: Arial, sans-serif;
        font-size: 12px;
    }
    .schedule-table th {
        background-color: #f0f2f6;
        border: 1px solid #ddd;
        padding: 8px;
        text-align: center;
        color: #333;
    }
    .schedule-table td {
        border: 1px solid #ddd;
        padding: 4px;
        vertical-align: top;
        background-color: #fff;
        color: #000;
    }
    .schedule-table td.lunch {
        background-color: #eee;
        color: #777;
        text-align: center;
        font-style: italic;
    }
    </style>
""", unsafe_allow_html=True)


# --- FUNCIONES HELPERS ---
def get_html_card(a: Assignment) -> str:
    return (
        f"<div style='border:1px solid #999; font-family:sans-serif; overflow:hidden;'>"
        f"<div style='background-color:#ffffcc; padding:2px 4px; font-size:11px; font-weight:bold;'>"
        f"{a.subject_name}</div>"
        f"<div style='padding:2px 4px; font-size:10px;'>{a.instructor} {a.room}"
        f"<span style='float:right; color:#666;'>({a.subject_type})</span></div>"
        f"</div>"
    )


def schedule_to_html(schedule, instructor=None) -> str:
    grid = schedule.grid
    html = "<table class='schedule-table'><thead><tr><th>Franja</th>"
    html += "".join(f"<th>{day}</th>" for day in grid.days)
    html += "</tr></thead><tbody>"
    for s, slot in enumerate(grid.time_slots):
        html += f"<tr><th>{slot}</th>"
        for d in range(grid.n_days):
            content = schedule.at(d, s)
            if content == LUNCH_BREAK:
                html += "<td class='lunch'>Almuerzo</td>"
            elif isinstance(content, Assignment) and (instructor is None or content.instructor == instructor):
                html += f"<td>{get_html_card(content)}</td>"
            else:
                html += "<td></td>"
        html += "</tr>"
    html += "</tbody></table>"
    return html


def initial_frames():
    try:
        bundle = load_data("data")
        subjects_df = pd.DataFrame([{
            "id": s.id, "name": s.name, "code": s.code, "instructor": s.instructor,
            "department": s.department, "semester": s.semester, "credits": s.credits,
            "hoursPerWeek": s.hours_per_week, "type": s.type,
        } for s in bundle.subjects], columns=SUBJECT_COLUMNS)
        rooms_df = pd.DataFrame([{
            "roomNumber": r.label, "type": r.type, "capacity": r.capacity,
            "building": r.building, "floor": r.floor, "isActive": r.is_active,
        } for r in bundle.rooms], columns=ROOM_COLUMNS)
    except (FileNotFoundError, ValueError):
        subjects_df = pd.DataFrame(columns=SUBJECT_COLUMNS)
        rooms_df = pd.DataFrame(columns=ROOM_COLUMNS)
    return subjects_df, rooms_df


# --- MAIN APP ---
def main():
    if "subjects_df" not in st.session_state:
        st.session_state.subjects_df, st.session_state.rooms_df = initial_frames()
    if "result" not in st.session_state:
        st.session_state.result = None

    # --- BARRA LATERAL ---
    with st.sidebar:
        st.title("🧬 Parámetros")
        population_size = st.number_input("Tamaño de población", min_value=1, value=50, step=1)
        generations = st.number_input("Generaciones", min_value=1, value=100, step=1)
        mutation_rate = st.slider("Tasa de mutación", 0.0, 1.0, 0.1, 0.01)
        elitism_fraction = st.slider("Fracción élite", 0.01, 1.0, 0.2, 0.01)
        seed = st.number_input("Semilla", min_value=0, value=42, step=1)
        st.markdown("---")
        page = st.radio("Ir a la sección:", ["Datos y Generación", "Horario", "Por Docente"])
        st.markdown("---")
        st.info("Generador de Horarios\nAlgoritmo Genético")

    # 1. DATOS Y GENERACIÓN
    if page == "Datos y Generación":
        st.header("📋 Asignaturas y Aulas")
        tabs = st.tabs(["Asignaturas", "Aulas"])
        with tabs[0]:
            edited_subjects = st.data_editor(
                st.session_state.subjects_df, num_rows="dynamic", key="editor_subjects",
                height=300, use_container_width=True,
            )
        with tabs[1]:
            edited_rooms = st.data_editor(
                st.session_state.rooms_df, num_rows="dynamic", key="editor_rooms",
                height=300, use_container_width=True,
            )

        st.divider()
        if st.button("🚀 GENERAR HORARIO"):
            try:
                cfg = GAConfig(
                    population_size=int(population_size),
                    generations=int(generations),
                    mutation_rate=float(mutation_rate),
                    elitism_fraction=float(elitism_fraction),
                    seed=int(seed),
                )
                subjects = subjects_from_frame(edited_subjects, cfg)
                rooms = rooms_from_frame(edited_rooms)
            except InvalidInput as e:
                st.error(f"Datos inválidos: {e}")
            else:
                st.session_state.subjects_df = edited_subjects
                st.session_state.rooms_df = edited_rooms
                progress = st.progress(0.0, text="Evolucionando...")

                def report(gen):
                    progress.progress(gen / cfg.generations, text=f"Generación {gen}/{cfg.generations}")
                    return False

                solver = GeneticSolver(subjects, rooms, cfg)
                best = solver.evolve(should_stop=report)
                progress.progress(1.0, text="¡Listo!")
                st.session_state.result = {
                    "best": best,
                    "subjects": subjects,
                    "history": pd.DataFrame(solver.history),
                    "cfg": cfg,
                }
                st.success("Horario generado. Ve a la sección 'Horario'.")

    # 2. HORARIO
    elif page == "Horario":
        st.header("🗓️ Horario Generado")
        result = st.session_state.result
        if result is None:
            st.warning("Debe generar un horario en la sección 'Datos y Generación' primero.")
            return

        best = result["best"]
        eval_res = evaluate(best.schedule, result["cfg"])
        c1, c2, c3 = st.columns(3)
        c1.metric("Fitness", f"{best.fitness:.2f}")
        c2.metric("Conflictos docente", eval_res.conflicts)
        c3.metric("Varianza de carga", f"{eval_res.load_variance:.2f}")

        st.markdown(schedule_to_html(best.schedule), unsafe_allow_html=True)

        missing = unplaced_hours(best.schedule, result["subjects"])
        if missing:
            st.warning(f"Horas sin ubicar por falta de franjas: {missing}")
        if eval_res.violations:
            with st.expander("Reporte de penalidades"):
                for v in eval_res.violations:
                    st.write(v)

        if not result["history"].empty:
            st.markdown("##### Evolución del fitness")
            st.line_chart(result["history"].set_index("gen")[["best_fitness", "avg_fitness"]])

        st.markdown("##### Exportar")
        c1, c2, c3 = st.columns(3)
        course = c1.text_input("Curso", value="Curso")
        department = c2.text_input("Departamento", value="")
        semester = c3.number_input("Semestre", min_value=1, value=1, step=1)
        doc = build_timetable_document(best.schedule, result["subjects"], course, int(semester), department)
        st.download_button(
            "Descargar JSON", json.dumps(doc, indent=2, ensure_ascii=False),
            file_name="timetable.json", mime="application/json",
        )
        st.download_button(
            "Descargar CSV", schedule_to_frame(best.schedule).to_csv(index=False),
            file_name="schedule.csv", mime="text/csv",
        )
        with st.expander("Vista tabular"):
            st.dataframe(schedule_to_grid_frame(best.schedule), use_container_width=True)

    # 3. POR DOCENTE
    elif page == "Por Docente":
        st.header("👩‍🏫 Horario por Docente")
        result = st.session_state.result
        if result is None:
            st.warning("Debe generar un horario en la sección 'Datos y Generación' primero.")
            return
        instructors = sorted({s.instructor for s in result["subjects"]})
        if not instructors:
            st.info("No hay docentes registrados.")
            return
        instructor = st.selectbox("Docente", instructors)
        st.markdown(schedule_to_html(result["best"].schedule, instructor), unsafe_allow_html=True)


if __name__ == "__main__":
    main()

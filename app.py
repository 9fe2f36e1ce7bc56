# app.py
# -----------------------------------------------
# ⏱️ Registro de horas (Streamlit)
# -----------------------------------------------
# Requiere: streamlit, sqlmodel, pandas, reportlab, psycopg2-binary (si usas Postgres)
# Run: streamlit run app.py

import logging
from datetime import date, time

import streamlit as st

from domain import NotFoundError, ValidationError
from repository import SqlKeyValueStore, WorkHoursRepository
from report import REPORT_FILENAME, build_pdf
from services import format_duration, format_money, parse_hhmm
from session import TrackerSession
from settings import configure_logging, database_url, pick_data_dir
from utils import entries_to_dataframe, page_count, page_of

configure_logging()
logger = logging.getLogger(__name__)

TITULO_APP = "Registro de Horas"
INICIO_DEFECTO = "14:00"
FIN_DEFECTO = "18:00"
FILAS_POR_PAGINA = 5

# =========================
# Persistencia
# =========================
@st.cache_resource
def get_repo(url: str) -> WorkHoursRepository:
    return WorkHoursRepository(SqlKeyValueStore(url, echo=False))

DB_URL = database_url(pick_data_dir())
repo = get_repo(DB_URL)

def get_session() -> TrackerSession:
    if "tracker" not in st.session_state:
        st.session_state["tracker"] = TrackerSession.load(repo)
    return st.session_state["tracker"]

tracker = get_session()

# =========================
# Helpers de estado
# =========================
def _flash(kind: str, msg: str):
    st.session_state["_flash"] = (kind, msg)

def _flash_if_any():
    item = st.session_state.pop("_flash", None)
    if item:
        kind, msg = item
        getattr(st, kind)(msg)

def _reset_form(d: str = "", start: str = INICIO_DEFECTO, end: str = FIN_DEFECTO):
    st.session_state["form_fecha"] = date.fromisoformat(d) if d else None
    st.session_state["form_inicio"] = parse_hhmm(start)
    st.session_state["form_fin"] = parse_hhmm(end)

def _form_values() -> tuple[str, str, str]:
    d = st.session_state.get("form_fecha")
    t0 = st.session_state.get("form_inicio")
    t1 = st.session_state.get("form_fin")
    as_hhmm = lambda t: t.strftime("%H:%M") if isinstance(t, time) else ""
    return (d.isoformat() if d else "", as_hhmm(t0), as_hhmm(t1))

def _check_persisted():
    if not tracker.persistence_ok:
        st.warning("No se pudieron guardar los cambios en disco. Siguen disponibles en esta sesión.")

if "form_inicio" not in st.session_state:
    _reset_form()

# =========================
# Acciones
# =========================
def on_submit():
    d, start, end = _form_values()
    try:
        if tracker.draft is not None:
            tracker.commit_edit(d, start, end)
            _flash("success", "Entrada actualizada correctamente")
        else:
            tracker.add_entry(d, start, end)
            _flash("success", "Entrada añadida correctamente")
    except ValidationError as e:
        _flash("error", str(e))
        return
    except NotFoundError:
        _flash("warning", "La entrada que estabas editando ya no existe.")
    _reset_form()

def on_cancel():
    tracker.cancel_edit()
    _reset_form()

def on_edit(key: int):
    draft = tracker.begin_edit(key)
    _reset_form(draft.date, draft.start, draft.end)

def on_delete(key: int):
    editing = tracker.draft is not None and tracker.draft.key == key
    tracker.remove_entry(key)
    if editing:
        _reset_form()
    _flash("success", "Entrada eliminada correctamente")

def on_save_config():
    try:
        tracker.update_config(
            float(st.session_state["cfg_horas"]),
            float(st.session_state["cfg_tarifa"]),
            float(st.session_state["cfg_tarifa_extra"]),
        )
    except ValidationError as e:
        _flash("error", str(e))
        return
    st.session_state["mostrar_config"] = False
    _flash("success", "Configuración guardada correctamente")

# =========================
# Página
# =========================
st.set_page_config(page_title=TITULO_APP, page_icon="⏱️", layout="centered")
st.title(TITULO_APP)
_flash_if_any()
_check_persisted()

if st.button("⚙️ Configuración"):
    st.session_state["mostrar_config"] = not st.session_state.get("mostrar_config", False)

if st.session_state.get("mostrar_config", False):
    cfg = tracker.config
    with st.form("config_form"):
        st.subheader("Configuración de Contrato")
        c1, c2, c3 = st.columns(3)
        c1.number_input("Horas contratadas al mes", min_value=0.0, step=1.0,
                        value=float(cfg.contract_hours_per_month), key="cfg_horas")
        c2.number_input("Tarifa hora normal (€)", min_value=0.0, step=0.01, format="%.2f",
                        value=float(cfg.hourly_rate), key="cfg_tarifa")
        c3.number_input("Tarifa hora extra (€)", min_value=0.0, step=0.01, format="%.2f",
                        value=float(cfg.extra_hourly_rate), key="cfg_tarifa_extra")
        st.form_submit_button("Guardar Configuración", on_click=on_save_config)

# =========================
# ➕ Nueva / ✏️ Editar entrada
# =========================
editando = tracker.draft is not None
st.subheader("✏️ Editar entrada" if editando else "➕ Nueva entrada")
c1, c2, c3 = st.columns([2, 1, 1])
c1.date_input("Fecha", key="form_fecha", format="YYYY-MM-DD")
c2.time_input("Entrada", key="form_inicio", step=300)
c3.time_input("Salida", key="form_fin", step=300)

if editando:
    b1, b2 = st.columns(2)
    b1.button("Guardar", on_click=on_submit, type="primary", use_container_width=True)
    b2.button("Cancelar", on_click=on_cancel, use_container_width=True)
else:
    st.button("Añadir", on_click=on_submit, type="primary", use_container_width=True)

# =========================
# 🗓️ Entradas
# =========================
st.subheader("🗓️ Entradas")
entries = tracker.entries
if not entries:
    st.info("Sin registros todavía.")
else:
    df = entries_to_dataframe(entries)
    paginas = page_count(df, FILAS_POR_PAGINA)
    pagina = st.number_input("Página", min_value=1, max_value=paginas, value=1, step=1) if paginas > 1 else 1
    visibles = page_of(df, pagina, FILAS_POR_PAGINA)
    cabecera = st.columns([3, 2, 2, 2, 1, 1])
    for col, titulo in zip(cabecera, ["Fecha", "Entrada", "Salida", "Horas", "", ""]):
        col.markdown(f"**{titulo}**")
    for idx, row in visibles.iterrows():
        key = entries[idx].key
        cols = st.columns([3, 2, 2, 2, 1, 1])
        cols[0].write(row["Fecha"])
        cols[1].write(row["Entrada"])
        cols[2].write(row["Salida"])
        cols[3].write(row["Horas"])
        cols[4].button("✏️", key=f"edit_{key}", help="Editar", on_click=on_edit, args=(key,))
        cols[5].button("🗑️", key=f"del_{key}", help="Eliminar", on_click=on_delete, args=(key,))

# =========================
# 📊 Resumen
# =========================
summary = tracker.summary()
cfg = tracker.config
st.subheader("📊 Resumen")
r1, r2 = st.columns(2)
r1.markdown(f"**Contrato mensual:** {cfg.contract_hours_per_month:g} horas")
r2.markdown(f"**Días trabajados:** {summary.unique_days_worked} días")
r1.markdown(f"**Horas trabajadas en total:** {format_duration(summary.total_hours)}")
r2.markdown(f"**Horas normales:** {format_duration(summary.regular_hours)} ({format_money(summary.regular_pay)})")
r1.markdown(f"**Horas extras trabajadas:** {format_duration(summary.extra_hours)} ({format_money(summary.extra_pay)})")
r2.markdown(f"**Total a cobrar:** {format_money(summary.total_pay)}")
st.markdown(f"### Total extras: {format_money(summary.extra_pay)}")

# =========================
# ⬇️ PDF
# =========================
pdf_bytes = build_pdf(entries, summary, cfg)
st.download_button(
    "Exportar a PDF",
    data=pdf_bytes,
    file_name=REPORT_FILENAME,
    mime="application/pdf",
    use_container_width=True,
)

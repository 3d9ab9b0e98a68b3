"""
Bike Route Suggestions Dashboard
Interactive view for comparing ranked bike route alternatives.

Run with:
    streamlit run route_dashboard.py
"""

import json

import streamlit as st
from streamlit_folium import st_folium

import logging_config
from api_adapters import ROUTE_API_BASE_URL, HttpRankingAdapter
from api_structures import MAX_SUGGESTIONS, MIN_SUGGESTIONS, Preferences, Suggestion
from formatting import ascent, km, mins, percent, slider_label
from map_surface import FoliumMapSurface
from request_panel import DEFAULT_END, DEFAULT_START, RequestPanel
from route_layer import RouteLayer, route_color
from selection import SelectionCoordinator

MAP_HEIGHT = 520

st.set_page_config(
    page_title="Bike Route Suggestions",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .route-dot {
        display: inline-block;
        width: 0.75rem;
        height: 0.75rem;
        border-radius: 999px;
        margin-right: 0.4rem;
    }
    .eyebrow {
        text-transform: uppercase;
        letter-spacing: 0.12em;
        font-size: 0.8rem;
        color: #0f766e;
        margin-bottom: 0;
    }
</style>
""", unsafe_allow_html=True)


def _dot(index: int) -> str:
    return f'<span class="route-dot" style="background-color:{route_color(index)}"></span>'


def get_session() -> dict:
    """Per-session objects. Created once; the route layer stays attached for the session."""
    ss = st.session_state
    if "coordinator" not in ss:
        logging_config.configure()
        coordinator = SelectionCoordinator()
        surface = FoliumMapSurface(map_size=(800, MAP_HEIGHT))
        ss.coordinator = coordinator
        ss.surface = surface
        ss.layer = RouteLayer(surface).attach(coordinator)
        ss.panel = RequestPanel(HttpRankingAdapter(), coordinator)
        ss.last_click = None
    return ss


# -----------------------------
# REQUEST PANEL
# -----------------------------
def render_request_form(panel: RequestPanel) -> None:
    with st.sidebar.form("request"):
        st.header("Request")
        start = st.text_input("Start (lat,lon)", value=DEFAULT_START)
        end = st.text_input("End (lat,lon)", value=DEFAULT_END)
        alternatives = st.number_input(
            "Alternatives", min_value=MIN_SUGGESTIONS, max_value=MAX_SUGGESTIONS, value=3, step=1)

        defaults = Preferences()
        fitness = st.slider("Fitness level", 0.0, 1.0, defaults.fitness_level, 0.01)
        st.caption(slider_label(fitness))
        scenic = st.slider("Scenic preference", 0.0, 1.0, defaults.scenic_preference, 0.01)
        st.caption(slider_label(scenic))
        avoid = st.slider("Avoid main roads", 0.0, 1.0, defaults.avoid_main_roads, 0.01)
        st.caption(slider_label(avoid))
        time_priority = st.slider("Time priority", 0.0, 1.0, defaults.time_priority, 0.01)
        st.caption(slider_label(time_priority))

        submitted = st.form_submit_button("Suggest routes")

    if submitted:
        preferences = Preferences(
            fitness_level=fitness,
            scenic_preference=scenic,
            avoid_main_roads=avoid,
            time_priority=time_priority,
        )
        with st.spinner("Ranking routes..."):
            panel.submit(start, end, int(alternatives), preferences)

    st.sidebar.caption(f"API base: {ROUTE_API_BASE_URL}")
    if panel.error:
        st.sidebar.error(panel.error)


# -----------------------------
# MAP PANEL (chip strip + map)
# -----------------------------
def render_chip_strip(coordinator: SelectionCoordinator) -> None:
    suggestions = coordinator.suggestions
    if not suggestions:
        return
    columns = st.columns(len(suggestions))
    for index, (column, item) in enumerate(zip(columns, suggestions)):
        with column:
            st.markdown(_dot(index), unsafe_allow_html=True)
            st.button(
                item.id,
                key=f"chip-{index}-{item.id}",
                type="primary" if coordinator.is_active(item.id) else "secondary",
                on_click=coordinator.select,
                args=(item.id,),
            )


def render_map(ss) -> None:
    coordinator: SelectionCoordinator = ss.coordinator
    active = coordinator.active_suggestion

    st.subheader("Route Map")
    if active is not None:
        st.caption(f"Active: {active.id} ({km(active.metrics.distance_m)}, "
                   f"{mins(active.metrics.duration_s)})")
    else:
        st.caption("Request suggestions to render routes on the map.")

    render_chip_strip(coordinator)

    result = st_folium(
        ss.surface.to_folium(),
        key="route_map",
        height=MAP_HEIGHT,
        use_container_width=True,
        returned_objects=["last_object_clicked", "last_object_clicked_tooltip"],
    )
    if not coordinator.suggestions:
        st.info("Run a suggestion request to plot alternatives here.")

    # st_folium keeps reporting the last click on every rerun; act on new clicks only.
    tooltip = (result or {}).get("last_object_clicked_tooltip")
    clicked = (result or {}).get("last_object_clicked") or {}
    signature = (tooltip, clicked.get("lat"), clicked.get("lng"))
    if tooltip and signature != ss.last_click:
        ss.last_click = signature
        if ss.surface.handle_click(tooltip):
            st.rerun()


# -----------------------------
# RESULTS PANEL (card list)
# -----------------------------
def render_card(coordinator: SelectionCoordinator, index: int, item: Suggestion) -> None:
    active = coordinator.is_active(item.id)
    with st.container(border=True):
        head, score = st.columns([3, 1])
        head.markdown(f"{_dot(index)}<strong>{item.id}</strong>", unsafe_allow_html=True)
        score.markdown(f"score {item.score:.3f}")
        st.write(item.explanation)
        m = item.metrics
        st.markdown(
            f"- Distance: {km(m.distance_m)}\n"
            f"- ETA: {mins(m.duration_s)}\n"
            f"- Ascent: {ascent(m.ascend_m)}\n"
            f"- Scenic ratio: {percent(m.scenic_ratio)}\n"
            f"- Main road ratio: {percent(m.major_road_ratio)}"
        )
        st.button(
            "Active" if active else "Select",
            key=f"card-{index}-{item.id}",
            type="primary" if active else "secondary",
            disabled=active,
            on_click=coordinator.select,
            args=(item.id,),
        )
        with st.expander("Raw route JSON"):
            st.code(json.dumps(item.route, indent=2, default=str), language="json")


def render_results(panel: RequestPanel, coordinator: SelectionCoordinator) -> None:
    st.subheader("Suggestions")
    if not panel.has_response:
        st.caption("Submit a request to score and compare alternatives.")
    if panel.meta is not None:
        st.caption(f"Received {panel.meta.source_paths} candidate path(s), "
                   f"returning {panel.meta.returned_suggestions}.")
    for index, item in enumerate(coordinator.suggestions):
        render_card(coordinator, index, item)


def main() -> None:
    ss = get_session()

    st.markdown('<p class="eyebrow">open-route</p>', unsafe_allow_html=True)
    st.title("Bike Route Suggestions")
    st.caption("Tune your route profile, then rank alternatives by speed, terrain, and road feel.")

    render_request_form(ss.panel)

    map_column, results_column = st.columns([3, 2])
    with map_column:
        render_map(ss)
    with results_column:
        render_results(ss.panel, ss.coordinator)


main()

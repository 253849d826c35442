import logging

import streamlit as st

from portal_linker.commands import placement_commands
from portal_linker.config import SolverConfig
from portal_linker.errors import ProblemParseError
from portal_linker.parser import parse_problem
from portal_linker.render import render_probe_distances, render_result
from portal_linker.solve import SolveResult, solve

EXAMPLE_PROBLEM = """# Overworld base and its nether hub
ENTITY_SIZE 0.6
PORTAL Base A X
PORTAL Hub B X
POS Base INC -64 60 -64 64 80 64
POS Hub INC -16 60 -16 16 80 16
LINK Base Hub
LINK Hub Base
OPTIMIZE_POS Base 0 64 0
"""

logging.basicConfig(level=logging.INFO)

st.set_page_config(layout="wide", page_title="Portal Linker")

if "problem_text" not in st.session_state:
    st.session_state["problem_text"] = EXAMPLE_PROBLEM

tab_solve, tab_config = st.tabs(["Solve", "Config"])

with tab_config:
    seed = st.number_input("Seed", value=0, step=1)
    max_iterations = st.number_input(
        "Max iterations", min_value=1_000, value=100_000, step=1_000
    )
    initial_temperature = st.number_input(
        "Initial temperature", min_value=1.0, value=100_000.0
    )
    st.session_state["config"] = SolverConfig(
        seed=int(seed),
        max_iterations=int(max_iterations),
        initial_temperature=float(initial_temperature),
    )

with tab_solve:
    left_col, right_col = st.columns([0.4, 0.6])

    with left_col:
        text = st.text_area("Problem", key="problem_text", height=400)
        solve_clicked = st.button("Solve", key="solve_btn", use_container_width=True)
        status_box = st.empty()
        progress_bar = st.progress(0.0)

    if solve_clicked:
        try:
            problem = parse_problem(text)
        except ProblemParseError as exc:
            status_box.error(str(exc))
        else:

            def on_status(message: str) -> None:
                status_box.info(f"Status: {message}")

            def on_progress(
                iteration: int, bound: int, temperature: float, metric: float
            ) -> None:
                progress_bar.progress(min(iteration / max(bound, 1), 1.0))
                status_box.info(
                    f"Status: Optimizing... Iteration {iteration}/{bound} | "
                    f"Temp: {temperature:.2f} | Best Cost: {metric:.2f}"
                )

            result: SolveResult = solve(
                problem,
                st.session_state["config"],
                status_fn=on_status,
                progress_fn=on_progress,
            )
            progress_bar.progress(1.0)
            st.session_state["result"] = (problem, result)

    with right_col:
        if "result" in st.session_state:
            problem, result = st.session_state["result"]
            if result.success:
                st.success(result.message)
            else:
                st.error(result.message)
            tab_report, tab_links, tab_commands = st.tabs(
                ["Report", "Link Distances", "Commands"]
            )
            with tab_report:
                st.code(render_result(problem, result), language=None)
            with tab_links:
                if result.verification is not None:
                    st.code(render_probe_distances(result.verification), language=None)
            with tab_commands:
                if result.state is not None:
                    st.code("\n".join(placement_commands(problem, result.state)))
                else:
                    st.write("No commands generated (no solution found).")

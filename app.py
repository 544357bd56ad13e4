"""
Page Replacement Visualizer — Optimal, Second-Chance & WSClock

This application steps a page replacement policy through a trace of memory
accesses and shows, access by access:
    - The frame table with each page's reference and dirty bits
    - Whether the access was a hit, a simple miss or a replacement
    - Which page was evicted, and the write-backs WSClock schedules
    - Fault counts for all three policies on the same trace

Built with Streamlit for the web interface and Plotly for visualizations.
Run with:  streamlit run app.py
"""

# =============================================================================
# IMPORTS
# =============================================================================

import time                                  # For pacing "Run Sequence"
from typing import List, Optional

import streamlit as st                       # Web application framework
import plotly.graph_objects as go            # Interactive plotting library

from access_trace import AccessRecord, TraceParseError, parse_trace
from config import Algorithm, ConfigurationError
from engine import ReplacementEngine
from utils import frame_label, get_color, get_frame_color, result_label


DEFAULT_TRACE = "R:1 W:2 R:3 W:2 W:4 R:4 R:4 R:5"


# =============================================================================
# HELPERS
# =============================================================================

def load_trace(text: str) -> Optional[List[AccessRecord]]:
    """
    Parse the trace text area, reporting errors in the UI.

    Returns:
        Optional[List[AccessRecord]]: Parsed trace, or None if it is invalid
    """
    try:
        return parse_trace(text)
    except TraceParseError as e:
        st.error(f"Trace error: {e}")
        return None


def get_engine(capacity: int, algorithm: str, tau: int, trace: List[AccessRecord]) -> ReplacementEngine:
    """
    Fetch the engine from session state, rebuilding it when any setting or
    the trace changed since the last rerun.
    """
    key = (capacity, algorithm, tau, tuple(trace))
    if st.session_state.get("engine_key") != key:
        engine = ReplacementEngine(capacity, algorithm, tau)
        engine.load(trace)
        st.session_state.engine = engine
        st.session_state.engine_key = key
    return st.session_state.engine


# =============================================================================
# STREAMLIT UI - Web Application Interface
# =============================================================================

st.set_page_config(page_title="Page Replacement Visualizer", layout="wide")

# Page selector for switching between Simulator and Concepts views
view = st.sidebar.radio("Choose View", ["Simulator", "Concepts"])

st.title("Page Replacement Visualizer — Optimal, Second-Chance & WSClock")

# =============================================================================
# CONCEPTS PAGE - Educational Content
# =============================================================================

if view == "Concepts":
    st.header("Replacement Policies Used in This Project")
    st.markdown(
        """
        ## 📘 Key Concepts

        ### **1. Frames and Faults**
        - Physical memory holds a fixed number of *frames*.
        - An access to a page that is not resident is a **fault**.
        - If a frame is free the page is simply loaded; otherwise a resident
          page must be **evicted**.

        ### **2. Optimal (Belady)**
        - Evict the page whose next use is farthest in the future.
        - A page never used again is always the first choice.
        - Needs the whole future trace, so it is a yardstick, not a real policy.

        ### **3. Second-Chance (Clock)**
        - Frames are kept in FIFO order and swept by a clock hand.
        - Every access sets the page's **reference bit**.
        - The hand clears set bits and moves on; the first page found with a
          clear bit is evicted.

        ### **4. WSClock**
        - Clock sweep plus the **age** of each page (accesses since last use)
          and its **dirty bit**.
        - An unreferenced page older than **tau** is evicted at once if clean.
        - An old dirty page gets a **write-back** scheduled instead and the
          sweep continues.
        - If nothing old and clean turns up within two sweeps, the best
          fallback is taken: old-and-dirty, then clean, then dirty pages
          inside the working set.

        ### **5. Trace Format**
        - Whitespace separated tokens: `R:<page>` for reads, `W:<page>` for
          writes, e.g. `R:1 W:2 R:1`.
        """
    )
    st.stop()

# -----------------------------------------------------------------------------
# SIDEBAR - Simulation Settings
# -----------------------------------------------------------------------------

st.sidebar.header("Simulation Settings")

capacity = st.sidebar.number_input("Frames", min_value=1, max_value=64, value=3, step=1)

algorithm = st.sidebar.selectbox("Replacement Policy", options=list(Algorithm.ALL))

tau = st.sidebar.number_input(
    "Tau (WSClock age threshold)",
    min_value=0,
    max_value=1000,
    value=3,
    step=1,
    disabled=(algorithm != Algorithm.WSCLOCK),
)

st.sidebar.markdown("---")

# -----------------------------------------------------------------------------
# SIDEBAR - Access Sequence Controls
# -----------------------------------------------------------------------------

st.sidebar.header("Access Trace")

trace_input = st.sidebar.text_area("Accesses (R:<page> / W:<page>)", value=DEFAULT_TRACE)

run_speed = st.sidebar.slider("Playback speed (ops/sec)", min_value=0.5, max_value=20.0, value=5.0)

trace = load_trace(trace_input)
if trace is None:
    st.stop()

try:
    manager = get_engine(int(capacity), algorithm, int(tau), trace)
except ConfigurationError as e:
    st.error(f"Configuration error: {e}")
    st.stop()

if st.sidebar.button("Reset Simulation"):
    manager.reset()
    st.sidebar.success("Simulation reset")

# =============================================================================
# MAIN CONTENT AREA - Two Column Layout
# =============================================================================

col1, col2 = st.columns([1, 2])

# -----------------------------------------------------------------------------
# LEFT COLUMN - Controls and Event Log
# -----------------------------------------------------------------------------

with col1:
    st.subheader("Controls")
    st.write(f"Access {manager.position} of {len(manager.trace)}")

    if st.button("Step Once"):
        if manager.finished:
            st.warning("Trace finished — reset to run again")
        else:
            record = manager.trace[manager.position]
            result = manager.step()
            st.success(f"Accessed {result_label(result, record)}")

    if st.button("Run Sequence"):
        if manager.finished:
            st.warning("No accesses left to run")
        else:
            while manager.step() is not None:
                time.sleep(1.0 / run_speed)
            st.success("Sequence run finished")

    # Most recent 20 events, newest first
    st.subheader("Event Log")
    for ev in manager.event_log[-20:][::-1]:
        st.write(ev)

# -----------------------------------------------------------------------------
# RIGHT COLUMN - Visualizations
# -----------------------------------------------------------------------------

with col2:
    # ----- Frame Table -----
    st.subheader("Frame Table")
    frames = manager.get_state()

    x, y, text, colors = [], [], [], []
    for i in range(frames.capacity):
        page = frames[i] if i < len(frames) else None
        label = frame_label(i, page)
        if i == frames.hand and algorithm != Algorithm.OPTIMAL:
            label += " ◀ hand"
        x.append(i)
        y.append(1)
        text.append(label)
        colors.append(get_frame_color(page))

    fig = go.Figure()
    fig.add_trace(go.Bar(x=x, y=y, text=text, marker_color=colors, hovertext=text, hoverinfo="text"))
    fig.update_layout(height=150, showlegend=False, yaxis=dict(showticklabels=False))
    st.plotly_chart(fig, use_container_width=True)

    # ----- Resident Pages -----
    st.subheader("Resident Pages")
    if len(frames) == 0:
        st.write("Frame table empty — no pages loaded yet")
    else:
        st.table([
            {
                "frame": i,
                "page": page.page_number,
                "referenced": page.referenced,
                "dirty": page.dirty,
                "last_access": page.last_access_clock,
                "age": max(0, manager.position - 1 - page.last_access_clock),
            }
            for i, page in enumerate(frames)
        ])

    # ----- Result Timeline -----
    st.subheader("Results")
    results = manager.get_results()
    if results:
        timeline = go.Figure()
        timeline.add_trace(go.Bar(
            x=list(range(len(results))),
            y=[1] * len(results),
            text=[str(manager.trace[i]) for i in range(len(results))],
            hovertext=[result_label(r, manager.trace[i]) for i, r in enumerate(results)],
            hoverinfo="text",
            marker_color=[get_color(r) for r in results],
        ))
        timeline.update_layout(height=150, showlegend=False, yaxis=dict(showticklabels=False))
        st.plotly_chart(timeline, use_container_width=True)

    # ----- Statistics -----
    st.subheader("Statistics")
    stats = manager.get_stats()

    st.metric("Accesses", stats["total_refs"])
    st.metric("Page Faults", stats["faults"])
    st.metric("Hit Ratio", stats["hit_ratio"])
    if algorithm == Algorithm.WSCLOCK:
        st.metric("Write-backs Scheduled", stats["write_backs"])

    fig2 = go.Figure()
    fig2.add_trace(go.Bar(x=["Hits", "Faults"], y=[stats["hits"], stats["faults"]]))
    fig2.update_layout(height=300, title="Hits vs Faults")
    st.plotly_chart(fig2, use_container_width=True)

    # ----- Policy Comparison -----
    st.subheader("Faults per Policy (whole trace)")
    comparison = ReplacementEngine.compare(int(capacity), trace, int(tau))
    fig3 = go.Figure()
    fig3.add_trace(go.Bar(x=list(comparison), y=list(comparison.values())))
    fig3.update_layout(height=300)
    st.plotly_chart(fig3, use_container_width=True)

# =============================================================================
# FOOTER - Usage Tips and Examples
# =============================================================================

st.markdown("---")
st.markdown(
    "**Usage tips**:\n"
    "- Enter a trace such as `R:1 W:2 R:1` and click **Step Once** or **Run Sequence**.\n"
    "- Changing the frame count, policy, tau or trace starts a fresh run.\n"
    "- Tau only affects WSClock."
)

st.markdown("---")
st.markdown(
    "**Examples**:\n"
    "1) Optimal, 2 frames: `R:1 R:2 R:3` evicts page 1, neither page is used again.\n"
    "2) Second-Chance, 3 frames: `R:1 R:2 R:3 R:4 R:2 R:5` spares page 2 after its hit.\n"
    "3) WSClock, 3 frames, tau 3: the default trace skips dirty page 2 and evicts clean page 3."
)

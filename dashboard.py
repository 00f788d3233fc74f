import html

import streamlit as st

from lrckit.ConfigManager import ConfigManager
from lrckit.ConvertEngine import STATUS_SUCCESS, ConvertEngine
from lrckit.errors import ConfigError
from lrckit.FileScanner import scan_by_ext, scan_files
from lrckit.logging_utils import read_log_tail
from lrckit.RecycleEngine import RecycleEngine
from lrckit.StateManager import StateManager

# --- Streamlit Page Config ---
st.set_page_config(
    page_title="LrcKit",
    page_icon="🎵",
    layout="wide",
    initial_sidebar_state="expanded",
)

# --- Custom Styling ---
st.markdown(
    """
    <style>
    .main { background-color: #0a0a0c; }
    .stMetric { background-color: #131316; padding: 15px; border-radius: 10px; border: 1px solid #27272a; }
    .file-row {
        background-color: #131316;
        padding: 10px 14px;
        border-radius: 12px;
        border: 1px solid #27272a;
        margin-bottom: 8px;
    }
    .status-badge {
        padding: 2px 8px;
        border-radius: 20px;
        font-size: 0.7rem;
        font-weight: 600;
        text-transform: uppercase;
    }
    .status-pending { background-color: #3f3f46; color: white; }
    .status-processing { background-color: #2563eb; color: white; }
    .status-success { background-color: #059669; color: white; }
    .status-failed, .status-error, .status-write_error { background-color: #dc2626; color: white; }
    </style>
""",
    unsafe_allow_html=True,
)


@st.cache_resource
def init_engines():
    """Initializes components once per server process."""
    try:
        config = ConfigManager()
    except ConfigError as e:
        st.error(f"Initialization Error: {e}")
        return None, None, None, None
    state = StateManager(config.state_file)
    recycler = RecycleEngine(config)
    engine = ConvertEngine(config, recycler, state)
    return config, state, recycler, engine


def file_row_html(f) -> str:
    """Card markup for one scanned file. File names are user data and get escaped."""
    status = html.escape(f.status, quote=True)
    return f"""
            <div class="file-row">
                <span class="status-badge status-{status}">{status}</span>
                <b style="margin-left: 8px;">{html.escape(f.name)}</b><br/>
                <code style="font-size: 0.7rem;">{html.escape(f.path)}</code>
            </div>
            """


def render_file_list(files):
    if not files:
        st.caption("No files loaded. Pick a folder and press Scan.")
        return
    for f in files:
        st.markdown(file_row_html(f), unsafe_allow_html=True)


def file_stats(files, done_label):
    total = len(files)
    done = sum(1 for f in files if f.status == STATUS_SUCCESS)
    c1, c2 = st.columns(2)
    c1.metric("Total", total)
    c2.metric(done_label, done)


def converter_tab(config, engine):
    files = st.session_state.setdefault("convert_list", [])

    directory = st.text_input("Folder to scan for .vtt/.srt", key="convert_dir")
    scan_col, run_col = st.columns(2)
    if scan_col.button("📂 Scan", key="convert_scan", use_container_width=True):
        if directory:
            st.session_state.convert_list = files = scan_files(directory)
    if run_col.button(
        "🔄 Start",
        key="convert_run",
        type="primary",
        use_container_width=True,
        disabled=not files,
    ):
        with st.spinner(f"Converting {len(files)} files..."):
            engine.convert_batch(
                files, delete_source=config.auto_delete_source, progress=False
            )
        st.toast("Conversion finished")

    file_stats(files, "Done")
    render_file_list(files)


def cleaner_tab(config, recycler):
    files = st.session_state.setdefault("clean_list", [])

    directory = st.text_input(
        f"Folder to clean ({config.cleaner_exts})", key="clean_dir"
    )
    scan_col, run_col = st.columns(2)
    if scan_col.button("📂 Scan", key="clean_scan", use_container_width=True):
        if directory:
            st.session_state.clean_list = files = scan_by_ext(
                directory, config.cleaner_exts
            )
    if run_col.button(
        "🗑️ Clean",
        key="clean_run",
        type="primary",
        use_container_width=True,
        disabled=not files,
    ):
        recycler.recycle_file_stats(files)
        removed = sum(1 for f in files if f.status == STATUS_SUCCESS)
        st.toast(f"Recycled {removed}/{len(files)} files")

    file_stats(files, "Deleted")
    render_file_list(files)


def logs_tab():
    lines = read_log_tail(300)
    if st.button("🔁 Refresh", key="logs_refresh"):
        st.rerun()
    st.code("\n".join(lines) if lines else "No log entries yet.", language="log")


def settings_tab(config, state):
    st.subheader("Settings")
    st.write(f"Loaded from `{config.path}`")

    auto_delete = st.toggle(
        "Auto-Delete Source",
        value=config.auto_delete_source,
        help="Automatically move converted source files to the trash.",
    )
    cleaner_exts = st.text_input(
        "Batch Cleaner Extensions",
        value=config.cleaner_exts,
        help="Separate multiple extensions with commas, for example: wav, flac, zip.",
    )
    workers = st.number_input(
        "Parallel conversions", min_value=1, max_value=32, value=config.workers
    )
    permanent = st.toggle(
        "Delete permanently (skip the trash)", value=config.permanent_delete
    )

    if st.button("💾 Save", type="primary"):
        try:
            config.update(
                auto_delete_source=auto_delete,
                cleaner_exts=cleaner_exts,
                workers=int(workers),
                permanent_delete=permanent,
            )
            config.save()
            st.success("Settings saved")
        except (ConfigError, OSError) as e:
            st.error(f"Could not save settings: {e}")

    st.subheader("Last Run")
    st.json(state.state.get("last_run", {}))


# --- Main App ---
def main():
    config, state, recycler, engine = init_engines()
    if not config:
        return

    with st.sidebar:
        st.title("🎵 LrcKit")
        st.write(f"**Auto-delete:** `{config.auto_delete_source}`")
        st.write(f"**Cleaner:** `{config.cleaner_exts}`")
        st.write(f"**Converted so far:** `{len(state.state['converted'])}`")

    tab_convert, tab_clean, tab_logs, tab_settings = st.tabs(
        ["🎵 Converter", "🧹 Cleaner", "📜 Logs", "⚙️ Settings"]
    )
    with tab_convert:
        converter_tab(config, engine)
    with tab_clean:
        cleaner_tab(config, recycler)
    with tab_logs:
        logs_tab()
    with tab_settings:
        settings_tab(config, state)


if __name__ == "__main__":
    main()

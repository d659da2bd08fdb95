"""commitwalk, interactive Streamlit dashboard over a finished crawl."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import plotly.express as px
import streamlit as st

from commitwalk.extractors import extract_reviewers
from commitwalk.storage import COMMIT_SUFFIX

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="commitwalk",
    page_icon="🚶",
    layout="wide",
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

@st.cache_data
def load_table(path: str) -> pd.DataFrame:
    # identities contain no commas, so a plain split is enough
    rows = Path(path).read_text(encoding="utf-8").split("\n")
    header, body = rows[0].split(","), [r.rsplit(",", 2) for r in rows[1:] if r]
    df = pd.DataFrame(body, columns=header)
    return df.astype({"created": int, "reviewed": int})


@st.cache_data
def load_commits(directory: str) -> pd.DataFrame:
    records = []
    for f in sorted(Path(directory).glob(f"*{COMMIT_SUFFIX}")):
        message = f.read_text(encoding="utf-8")
        records.append({
            "hash": f.name[: -len(COMMIT_SUFFIX)],
            "subject": message.split("\n", 1)[0],
            "reviewers": extract_reviewers(message),
            "message": message,
        })
    return pd.DataFrame(records, columns=["hash", "subject", "reviewers", "message"])


# ---------------------------------------------------------------------------
# Sidebar: load crawl output
# ---------------------------------------------------------------------------
st.sidebar.title("🚶 commitwalk")
st.sidebar.markdown("Gitiles contribution explorer")

default_table = Path(__file__).parent / "out.csv"
table_path = st.sidebar.text_input("Summary table", value=str(default_table))
commits_dir = st.sidebar.text_input("Commit files directory", value=str(Path(__file__).parent))

try:
    df = load_table(table_path)
except FileNotFoundError:
    st.error(f"Table not found: `{table_path}`\n\nRun `python main.py crawl` to generate it.")
    st.stop()

if df.empty:
    st.info("The summary table has no contributors yet.")
    st.stop()

if Path(commits_dir).is_dir():
    commits = load_commits(commits_dir)
else:
    commits = pd.DataFrame(columns=["hash", "subject", "reviewers", "message"])

st.sidebar.divider()
min_total = st.sidebar.slider("Minimum contributions", 0, int((df["created"] + df["reviewed"]).max() or 1), 0)
excluded = st.sidebar.multiselect("Exclude contributors", options=sorted(df["contributor"]), default=[])

view = df[(df["created"] + df["reviewed"] >= min_total) & ~df["contributor"].isin(excluded)]

# ---------------------------------------------------------------------------
# Page title
# ---------------------------------------------------------------------------
st.title("Contributions")
st.caption(f"{Path(table_path).name}  ·  {len(view):,} of {len(df):,} contributors shown")

c1, c2, c3 = st.columns(3)
c1.metric("Contributors", f"{len(view):,}")
c2.metric("Commits created", f"{view['created'].sum():,}")
c3.metric("Reviews", f"{view['reviewed'].sum():,}")

st.divider()

tab1, tab2 = st.tabs(["👥 Contributors", "📝 Commits"])

# ============================================================
# TAB 1: CONTRIBUTORS
# ============================================================
with tab1:
    if view.empty:
        st.info("No contributors match the current filters.")
    else:
        melted = view.melt(
            id_vars="contributor",
            value_vars=["created", "reviewed"],
            var_name="kind",
            value_name="count",
        )
        order = view.sort_values(["created", "reviewed"], ascending=False)["contributor"].tolist()
        fig = px.bar(
            melted,
            x="count",
            y="contributor",
            color="kind",
            orientation="h",
            barmode="group",
            category_orders={"contributor": order},
            color_discrete_map={"created": "#2ecc71", "reviewed": "#3498db"},
        )
        fig.update_layout(height=max(300, 28 * len(view)), yaxis_title=None, legend_title=None)
        st.plotly_chart(fig, use_container_width=True)

        st.dataframe(
            view.sort_values(["created", "reviewed"], ascending=False),
            use_container_width=True,
            hide_index=True,
        )

# ============================================================
# TAB 2: COMMITS
# ============================================================
with tab2:
    if commits.empty:
        st.info(f"No `*{COMMIT_SUFFIX}` files in `{commits_dir}`.")
    else:
        query = st.text_input("Filter by subject or reviewer", value="")
        shown = commits
        if query:
            q = query.lower()
            shown = commits[
                commits["subject"].str.lower().str.contains(q, regex=False)
                | commits["reviewers"].apply(lambda rs: any(q in r.lower() for r in rs))
            ]
        st.caption(f"{len(shown):,} commit(s)")
        for _, row in shown.iterrows():
            with st.expander(f"{row['hash'][:12]}  {row['subject'][:80]}"):
                if row["reviewers"]:
                    st.markdown("**Reviewed by:** " + ", ".join(row["reviewers"]))
                st.code(row["message"], language=None)

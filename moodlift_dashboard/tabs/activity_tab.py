import pandas as pd
import streamlit as st

from moodlift_dashboard.data import api_client, repositories
from moodlift_dashboard.visualizations import build_heatmap_grid, contribution_heatmap


def render_activity_tab(ctx):
    st.markdown("<div class='section-title'>Activity</div>", unsafe_allow_html=True)
    try:
        days = repositories.load_heatmap(ctx.user_id)
        activities = repositories.load_activities(ctx.user_id)
    except api_client.ApiError as exc:
        st.error(f"Activity unavailable: {exc}")
        return

    total = sum(int(item.get("count", 0) or 0) for item in days)
    z, text, x_labels, y_labels = build_heatmap_grid(days)
    st.plotly_chart(
        contribution_heatmap(z, text, x_labels, y_labels, title=f"{total} games in the last year"),
        use_container_width=True,
    )

    st.markdown("<div class='small-label'>Recent activity</div>", unsafe_allow_html=True)
    if not activities:
        st.caption("Nothing logged yet.")
        return
    frame = pd.DataFrame(activities)
    columns = [col for col in ("activity_date", "activity_type", "description") if col in frame.columns]
    st.dataframe(
        frame[columns].rename(
            columns={"activity_date": "Date", "activity_type": "Type", "description": "Details"}
        ),
        hide_index=True,
        use_container_width=True,
    )

from __future__ import annotations

from moodlift_dashboard.constants import HEATMAP_COLORSCALE, THEME, WEEKDAY_ROW_LABELS


def apply_common_plot_style(fig, title, show_xgrid=True, show_ygrid=True):
    fig.update_layout(
        title=title,
        title_font=dict(color=THEME["text_main"], size=16),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        font=dict(color=THEME["text_main"]),
        margin=dict(l=40, r=20, t=40, b=30),
        xaxis=dict(
            showgrid=show_xgrid,
            gridcolor=THEME["plot_grid"],
            tickfont=dict(color=THEME["text_soft"]),
            zeroline=False,
        ),
        yaxis=dict(
            showgrid=show_ygrid,
            gridcolor=THEME["plot_grid"],
            tickfont=dict(color=THEME["text_soft"]),
            zeroline=False,
        ),
    )
    return fig


def weekly_activity_chart(weekly_activity, title="This week"):
    """Bars for games played per weekday with the average mood as a line."""
    import plotly.graph_objects as go

    days = [item["day"] for item in weekly_activity]
    games = [int(item.get("games", 0) or 0) for item in weekly_activity]
    moods = [int(item.get("mood", 0) or 0) for item in weekly_activity]

    fig = go.Figure()
    fig.add_trace(go.Bar(x=days, y=games, name="Games", marker_color=THEME["accent_soft"]))
    fig.add_trace(
        go.Scatter(
            x=days,
            y=moods,
            name="Mood",
            mode="lines+markers",
            line=dict(color=THEME["accent"], width=2),
            yaxis="y2",
        )
    )
    apply_common_plot_style(fig, title, show_xgrid=False)
    fig.update_layout(
        height=300,
        barmode="group",
        legend=dict(orientation="h", y=-0.2),
        yaxis2=dict(overlaying="y", side="right", showgrid=False, rangemode="tozero"),
    )
    return fig


def build_heatmap_grid(items):
    """Lay daily counts out as weekday rows by week columns.

    ``items`` is the chronological ``[{date, count}]`` list served by the API.
    Returns ``(z, hover_text, x_labels, y_labels)``; cells before the first day
    or after the last one stay NaN so they render blank.
    """
    import numpy as np
    import pandas as pd

    if not items:
        return np.full((7, 0), np.nan), [[] for _ in range(7)], [], list(WEEKDAY_ROW_LABELS)

    frame = pd.DataFrame(items)
    frame["date"] = pd.to_datetime(frame["date"])
    frame["count"] = frame["count"].fillna(0).astype(int)
    grid_start = frame["date"].iloc[0] - pd.Timedelta(days=int(frame["date"].iloc[0].weekday()))
    frame["week"] = (frame["date"] - grid_start).dt.days // 7
    frame["weekday"] = frame["date"].dt.weekday

    weeks = int(frame["week"].max()) + 1
    z = np.full((7, weeks), np.nan)
    text = [["" for _ in range(weeks)] for _ in range(7)]
    for day, count, week, weekday in zip(frame["date"], frame["count"], frame["week"], frame["weekday"]):
        z[weekday, week] = count
        noun = "activity" if count == 1 else "activities"
        text[weekday][week] = f"{day.date().isoformat()} • {count} {noun}"

    x_labels = []
    previous_month = None
    for week in range(weeks):
        month = (grid_start + pd.Timedelta(weeks=week)).strftime("%b")
        x_labels.append(month if month != previous_month else "")
        previous_month = month
    return z, text, x_labels, list(WEEKDAY_ROW_LABELS)


def contribution_heatmap(z, hover_text, x_labels, y_labels, title=""):
    import numpy as np
    import plotly.graph_objects as go

    zmax = float(np.nanmax(z)) if z.size and not np.all(np.isnan(z)) else 0.0
    fig = go.Figure(
        data=go.Heatmap(
            z=z,
            text=hover_text,
            hoverinfo="text",
            colorscale=HEATMAP_COLORSCALE,
            showscale=False,
            zmin=0,
            zmax=max(zmax, 1.0),
            xgap=3,
            ygap=3,
        )
    )
    fig.update_layout(
        title=title,
        title_font=dict(color=THEME["text_main"], size=16),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        height=220,
        margin=dict(l=30, r=10, t=40, b=10),
        xaxis=dict(
            showgrid=False,
            zeroline=False,
            tickmode="array",
            tickvals=list(range(len(x_labels))),
            ticktext=x_labels,
            side="top",
            tickfont=dict(color=THEME["text_soft"], size=10),
        ),
        yaxis=dict(
            showgrid=False,
            zeroline=False,
            tickmode="array",
            tickvals=list(range(len(y_labels))),
            ticktext=y_labels,
            autorange="reversed",
            tickfont=dict(color=THEME["text_soft"], size=10),
        ),
    )
    return fig

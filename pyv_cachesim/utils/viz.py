import plotly.express as px
import pandas as pd

def export_hit_miss_chart(caches, path: str):
    if not caches:
        with open(path, "w") as f:
            f.write("<h1>Cache Hits and Misses</h1><p>No data to display.</p>")
        return

    df = pd.DataFrame(caches)
    df['hits'] = pd.to_numeric(df['hits'], errors='coerce')
    df['misses'] = pd.to_numeric(df['misses'], errors='coerce')
    df = df.dropna(subset=['hits', 'misses'])

    # One row per (level, outcome) for a stacked bar
    long_df = df.melt(id_vars=['name'], value_vars=['hits', 'misses'],
                      var_name='outcome', value_name='count')

    fig = px.bar(
        long_df,
        x="name",
        y="count",
        color="outcome",
        text="count",
        title="Cache Hits and Misses per Level",
        labels={"name": "Cache Level", "count": "Accesses", "outcome": "Outcome"},
        color_discrete_map={"hits": "seagreen", "misses": "indianred"},
    )
    fig.update_layout(
        barmode="stack",
        font=dict(family="Courier New, monospace", size=12),
        legend_title="Outcome"
    )

    fig.write_html(path, include_plotlyjs="cdn", full_html=True)

def export_hit_miss_ascii(caches, width: int = 60):
    if not caches:
        return "No cache levels."

    max_visits = max((c['hits'] + c['misses'] for c in caches), default=0)
    if max_visits == 0:
        return "No accesses recorded."

    scale = width / max_visits

    chart = "Cache Hits/Misses (ASCII Chart, H = hit, m = miss)\n"
    chart += "-" * (width + 12) + "\n"
    for cache in caches:
        hit_len = int(cache['hits'] * scale)
        miss_len = int(cache['misses'] * scale)
        bar = ("H" * hit_len + "m" * miss_len).ljust(width, " ")
        chart += f"{cache['name']:>8} |{bar}|\n"
    chart += "-" * (width + 12) + "\n"
    chart += f"scale: {width} chars = {max_visits} accesses\n"

    return chart

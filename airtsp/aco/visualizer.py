# ----------------- visualizer.py -----------------
import plotly.graph_objects as go


def _positions(airports):
    pos = {}
    for i, apt in enumerate(airports):
        lat, lon = apt.coord.to_degrees()
        pos[i] = (lon, lat)
    return pos


def _cycle_trace(pos, tour, name, width, color, dash=None):
    x, y = [], []
    if tour:
        closed = list(tour) + [tour[0]]
        for k in range(len(closed) - 1):
            x0, y0 = pos[closed[k]]
            x1, y1 = pos[closed[k + 1]]
            x += [x0, x1, None]
            y += [y0, y1, None]
    return go.Scatter(
        x=x, y=y,
        line=dict(width=width, color=color, dash=dash),
        mode="lines",
        name=name,
        showlegend=True
    )


def draw_tour(airports, tour, iteration_tours=None, unfiltered=None, title=None, save_path=None):
    """
    Plots the airports and the closed tour through them (longitude on x, latitude on y).
    `iteration_tours` adds one animation frame per iteration showing the best tour so far.
    `unfiltered` airports are drawn as faint markers behind the selection.
    Writes HTML to `save_path` when given, otherwise opens the figure.
    """
    pos = _positions(airports)

    # ---------- Airports ----------
    apt_trace = go.Scatter(
        x=[pos[i][0] for i in pos],
        y=[pos[i][1] for i in pos],
        mode="markers+text",
        text=[apt.icao for apt in airports],
        hovertext=[apt.name for apt in airports],
        textposition="top center",
        marker=dict(size=8, color='white', line=dict(width=2, color='red')),
        name="Airports",
        showlegend=True
    )

    background = []
    if unfiltered:
        selected = {apt.icao for apt in airports}
        others = [apt for apt in unfiltered if apt.icao not in selected]
        if others:
            other_pos = [apt.coord.to_degrees() for apt in others]
            background.append(go.Scatter(
                x=[lon for _, lon in other_pos],
                y=[lat for lat, _ in other_pos],
                mode="markers",
                hovertext=[apt.icao for apt in others],
                marker=dict(size=5, color='lightgray'),
                name="Filtered out",
                showlegend=True
            ))

    # ---------- Frames for iterations ----------
    frames = []
    for idx, it_tour in enumerate(iteration_tours or []):
        path_trace = _cycle_trace(pos, it_tour, f"Iteration {idx + 1}", 3, 'orange')
        frames.append(go.Frame(name=str(idx), data=background + [path_trace, apt_trace]))

    final_trace = _cycle_trace(pos, tour, "Best ACO Tour", 3, 'blue')
    final_data = background + [final_trace, apt_trace]
    if frames:
        frames.append(go.Frame(name="final", data=final_data))

    layout = dict(
        title=title or f"ACO: best tour through {len(airports)} airports",
        showlegend=True,
        hovermode="closest",
        margin=dict(b=50, l=50, r=50, t=80),
        xaxis=dict(title="Longitude", showgrid=False, zeroline=False),
        yaxis=dict(title="Latitude", showgrid=False, zeroline=False, scaleanchor="x"),
        plot_bgcolor='white',
    )
    if frames:
        layout["updatemenus"] = [{
            "buttons": [
                {"args": [None, {"frame": {"duration": 500, "redraw": False},
                                 "fromcurrent": True, "transition": {"duration": 100}}],
                 "label": "▶ Play", "method": "animate"},
                {"args": [[None], {"frame": {"duration": 0, "redraw": False},
                                   "mode": "immediate",
                                   "transition": {"duration": 0}}],
                 "label": "⏸ Pause", "method": "animate"}
            ],
            "direction": "left",
            "pad": {"r": 10, "t": 10},
            "showactive": True,
            "type": "buttons",
            "x": 0.1,
            "xanchor": "right",
            "y": 1.02,
            "yanchor": "top"
        }]
        layout["sliders"] = [{
            "steps": [
                {"args": [[f.name], {"frame": {"duration": 0, "redraw": False},
                                     "mode": "immediate",
                                     "transition": {"duration": 0}}],
                 "label": f.name,
                 "method": "animate"} for f in frames
            ],
            "active": len(frames) - 1,
            "x": 0.1,
            "len": 0.85,
            "y": 0,
            "yanchor": "top",
            "currentvalue": {"prefix": "Iteration: ", "visible": True}
        }]

    fig = go.Figure(data=final_data, layout=go.Layout(**layout), frames=frames)

    if save_path:
        fig.write_html(str(save_path))
    else:
        fig.show()
    return fig

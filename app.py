"""
Web application for Swerve Setpoint Generator Analysis

Interactive dashboard to visualize how tire friction shapes the achievable
response to a velocity command.
"""

from typing import Any, Dict, List

import dash
from dash import dcc, html, Input, Output, State
from dash.exceptions import PreventUpdate
import numpy as np
import plotly.express as px
import plotly.graph_objs as go

from swerve import BodyVelocity, SwerveError, run_friction_sweep


# Initialize Dash app
app = dash.Dash(__name__)
app.title = "Swerve Setpoint Generator Analysis"


def _number_input(label: str, input_id: str, value: float, step: float) -> html.Div:
    return html.Div([
        html.Label(label, style={'fontWeight': 'bold', 'marginBottom': '5px'}),
        dcc.Input(
            id=input_id,
            type='number',
            value=value,
            step=step,
            style={'width': '100%', 'padding': '8px'}
        ),
    ], style={'width': '12%', 'display': 'inline-block', 'marginRight': '20px'})


# Define app layout
app.layout = html.Div([
    html.Div([
        html.H1("Swerve Setpoint Generator Analysis",
                style={'textAlign': 'center', 'marginBottom': '30px'}),

        html.Div([
            html.Div([
                html.Label("Friction Coefficients (comma-separated):",
                          style={'fontWeight': 'bold', 'marginBottom': '5px'}),
                dcc.Input(
                    id='mu-input',
                    type='text',
                    value='0.5,0.8,1.2,1.6',
                    style={'width': '100%', 'padding': '8px'}
                ),
            ], style={'width': '25%', 'display': 'inline-block', 'marginRight': '20px'}),

            _number_input("Duration (s):", 'duration-input', 2.0, 0.5),
            _number_input("vx (m/s):", 'vx-input', 3.0, 0.1),
            _number_input("vy (m/s):", 'vy-input', 0.0, 0.1),
            _number_input("omega (rad/s):", 'omega-input', 0.0, 0.1),

            html.Button('Run Simulation', id='run-button',
                       style={'width': '15%', 'padding': '10px', 'fontSize': '16px',
                              'backgroundColor': '#4CAF50', 'color': 'white',
                              'border': 'none', 'borderRadius': '5px', 'cursor': 'pointer'})
        ], style={'marginBottom': '30px', 'padding': '20px', 'backgroundColor': '#f5f5f5',
                  'borderRadius': '10px'}),

        html.Div(id='status-message', style={'marginBottom': '20px', 'fontSize': '14px'}),

        dcc.Loading(
            id="loading",
            type="default",
            children=[
                html.Div(id='results-container')
            ]
        )
    ], style={'maxWidth': '1400px', 'margin': '0 auto', 'padding': '20px'})
])


@app.callback(
    [Output("results-container", "children"), Output("status-message", "children")],
    [Input("run-button", "n_clicks")],
    [
        State("mu-input", "value"),
        State("duration-input", "value"),
        State("vx-input", "value"),
        State("vy-input", "value"),
        State("omega-input", "value"),
    ],
)
def update_results(
    n_clicks: int | None, mu_str: str, duration: float, vx: float, vy: float, omega: float
) -> tuple[Any, Any]:
    """Run simulation and update results"""
    if n_clicks is None:
        raise PreventUpdate

    try:
        coefficients = sorted(float(s.strip()) for s in mu_str.split(","))
    except ValueError:
        return [], html.Div("Error: Friction coefficients must be numbers.", style={"color": "red"})

    if duration is None or duration <= 0 or duration > 30:
        return [], html.Div(
            "Error: Duration must be between 0 and 30 seconds.",
            style={"color": "red"},
        )

    try:
        command = BodyVelocity(float(vx or 0.0), float(vy or 0.0), float(omega or 0.0))
        results = run_friction_sweep(coefficients, command=command, duration=duration)
    except SwerveError as e:
        return [], html.Div(f"Error: {e}", style={"color": "red"})

    status_msg = html.Div(
        f"Simulation complete! Analyzed {len(coefficients)} friction coefficients.",
        style={"color": "green"},
    )
    return create_results_layout(results, coefficients), status_msg


def _time_series(
    results: Dict[float, Dict[str, Any]],
    coefficients: List[float],
    values: Any,
    title: str,
    yaxis_title: str,
    unit: str,
) -> go.Figure:
    fig = go.Figure()
    colors = px.colors.qualitative.Set1
    for i, mu in enumerate(coefficients):
        result = results[mu]["result"]
        fig.add_trace(
            go.Scatter(
                x=result.time,
                y=values(result),
                mode="lines",
                name=f"mu={mu}",
                line=dict(color=colors[i % len(colors)], width=2),
                hovertemplate=f"mu: {mu}<br>Time: %{{x:.2f}}s<br>%{{y:.3f}} {unit}<extra></extra>",
            )
        )
    fig.update_layout(
        title=title,
        xaxis_title="Time (s)",
        yaxis_title=yaxis_title,
        hovermode="closest",
        height=400,
        template="plotly_white",
    )
    return fig


def create_results_layout(
    results: Dict[float, Dict[str, Any]], coefficients: List[float]
) -> html.Div:
    """Create the results visualization layout"""
    # 1. Achieved linear speed
    fig1 = _time_series(
        results, coefficients,
        lambda r: np.hypot(r.body_velocity[:, 0], r.body_velocity[:, 1]),
        "Achieved Linear Speed", "Speed (m/s)", "m/s",
    )
    # 2. Achieved angular rate
    fig2 = _time_series(
        results, coefficients,
        lambda r: r.body_velocity[:, 2],
        "Achieved Angular Rate", "Angular rate (rad/s)", "rad/s",
    )
    # 3. Interpolation factor
    fig3 = _time_series(
        results, coefficients,
        lambda r: r.interpolation_factor,
        "Interpolation Factor per Tick", "Factor", "",
    )
    # 4. Peak module force relative to the friction ceiling
    fig4 = _time_series(
        results, coefficients,
        lambda r: np.max(np.abs(r.module_forces), axis=1),
        "Peak Module Feedforward Force", "Force (N)", "N",
    )

    labels = [f"mu={mu}" for mu in coefficients]
    rise_times = [results[mu]["analysis"]["rise_time"] for mu in coefficients]
    utilizations = [results[mu]["analysis"]["friction_utilization"] * 100 for mu in coefficients]

    # 5. Rise time chart
    fig5 = go.Figure()
    fig5.add_trace(
        go.Bar(
            x=labels,
            y=rise_times,
            marker_color="steelblue",
            text=[f"{rt:.2f}s" for rt in rise_times],
            textposition="outside",
            hovertemplate="%{x}<br>Rise time: %{y:.3f}s<extra></extra>",
        )
    )
    fig5.update_layout(
        title="Rise Time by Friction Coefficient",
        xaxis_title="Friction coefficient",
        yaxis_title="Rise time (s)",
        height=400,
        template="plotly_white",
    )

    # 6. Friction utilization chart
    fig6 = go.Figure()
    fig6.add_trace(
        go.Bar(
            x=labels,
            y=utilizations,
            marker_color=["red" if u > 100.0 + 1e-6 else "green" for u in utilizations],
            text=[f"{u:.1f}%" for u in utilizations],
            textposition="outside",
            hovertemplate="%{x}<br>Utilization: %{y:.1f}%<extra></extra>",
        )
    )
    fig6.update_layout(
        title="Peak Friction Utilization",
        xaxis_title="Friction coefficient",
        yaxis_title="Utilization (%)",
        height=400,
        template="plotly_white",
    )

    # Summary table
    table_rows = [
        html.Tr([
            html.Th("Friction coefficient"),
            html.Th("Rise time (s)"),
            html.Th("Final error"),
            html.Th("Limited ticks (%)"),
            html.Th("Peak force (N)"),
            html.Th("Max steer rate (rad/s)"),
            html.Th("Steer rate OK"),
        ])
    ]
    for mu in coefficients:
        analysis = results[mu]["analysis"]
        ok_color = "green" if analysis["steer_rate_ok"] else "red"
        table_rows.append(
            html.Tr([
                html.Td(mu),
                html.Td(f"{analysis['rise_time']:.3f}"),
                html.Td(f"{analysis['final_error']:.4f}"),
                html.Td(f"{analysis['limited_fraction']*100:.1f}"),
                html.Td(f"{analysis['peak_force']:.1f}"),
                html.Td(f"{analysis['max_steer_rate']:.2f}"),
                html.Td(
                    "Yes" if analysis["steer_rate_ok"] else "No",
                    style={"color": ok_color, "fontWeight": "bold"},
                ),
            ])
        )

    return html.Div([
        html.H2("Simulation Results", style={"marginTop": "30px", "marginBottom": "20px"}),
        html.Div([
            html.H3("Summary Table", style={"marginBottom": "15px"}),
            html.Table(
                table_rows,
                style={
                    "width": "100%",
                    "borderCollapse": "collapse",
                    "marginBottom": "30px",
                    "fontSize": "14px",
                },
            ),
        ], style={"marginBottom": "30px"}),
        html.Div([
            html.Div([dcc.Graph(figure=fig1)], style={"marginBottom": "30px"}),
            html.Div([dcc.Graph(figure=fig2)], style={"marginBottom": "30px"}),
            html.Div([dcc.Graph(figure=fig3)], style={"marginBottom": "30px"}),
            html.Div([dcc.Graph(figure=fig4)], style={"marginBottom": "30px"}),
            html.Div([
                html.Div(
                    [dcc.Graph(figure=fig5)],
                    style={"width": "48%", "display": "inline-block", "marginRight": "2%"},
                ),
                html.Div(
                    [dcc.Graph(figure=fig6)],
                    style={"width": "48%", "display": "inline-block"},
                ),
            ], style={"marginBottom": "30px"}),
        ]),
    ])


if __name__ == "__main__":
    app.run(debug=True, port=8050)

"""
Streamlit web interface for the finsun toolkit.

Interactive UI with tabs for:
- Annuity valuation with a balance curve
- Periodic rate solver
- Sunrise/sunset and day length across the year
"""

from datetime import date, timedelta

import numpy as np
import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from finsun.core.annuity import fv, nper, pmt, pv
from finsun.core.exceptions import SolverError
from finsun.solvers.rate import solve_rate
from finsun.solvers.solar_event import solar_events
from finsun.utils.types import GeoCoordinate

st.set_page_config(page_title="finsun", layout="wide")

st.title("finsun")
st.markdown("Annuity valuation, rate solving and sunrise/sunset estimation")

# Sidebar parameters
st.sidebar.header("Annuity Parameters")
principal = st.sidebar.number_input("Present Value", value=30000.0)
annual_rate = st.sidebar.slider("Annual Rate (%)", 0.0, 20.0, 4.2) / 100
years = st.sidebar.slider("Term (years)", 1, 40, 30)
balloon = st.sidebar.number_input("Future Value", value=0.0)
at_start = st.sidebar.checkbox("Payments at period start", value=False)

periodic_rate = annual_rate / 12
periods = years * 12

tab1, tab2, tab3 = st.tabs(["Annuity", "Rate Solver", "Sunrise & Sunset"])

with tab1:
    st.header("Annuity Valuation")

    payment = pmt(periodic_rate, periods, principal, balloon, at_start)

    col1, col2 = st.columns(2)
    with col1:
        st.metric(label="Monthly Payment", value=f"{payment:.2f}")
        st.metric(label="Total Paid", value=f"{-payment * periods:.2f}")
    with col2:
        st.metric(
            label="Periods (check)",
            value=f"{nper(periodic_rate, payment, principal, balloon, at_start):.2f}",
        )
        st.metric(
            label="Present Value (check)",
            value=f"{pv(periodic_rate, periods, payment, balloon, at_start):.2f}",
        )

    # Outstanding balance after each period
    months = np.arange(0, periods + 1)
    balances = [-fv(periodic_rate, m, payment, principal, at_start) for m in months]

    fig_balance = go.Figure()
    fig_balance.add_trace(go.Scatter(x=months, y=balances, name="Balance"))
    fig_balance.update_layout(title="Outstanding Balance", xaxis_title="Period", yaxis_title="Balance")
    st.plotly_chart(fig_balance, use_container_width=True)

with tab2:
    st.header("Periodic Rate Solver")

    solve_payment = st.number_input("Payment per Period", value=-146.62)
    solve_periods = st.number_input("Number of Periods", value=360.0)
    guess = st.number_input("Seed Rate", value=0.1, min_value=0.0, max_value=1.0)
    method = st.selectbox("Method", ["auto", "secant", "brent"])

    if st.button("Solve for Rate"):
        result = solve_rate(solve_periods, solve_payment, principal, balloon, at_start, guess, method)

        if result.success:
            st.success(f"Rate: {result.rate:.8f} per period ({result.rate * 1200:.4f}% annual)")
            st.info(f"Method: {result.method} | Iterations: {result.iterations}")
        else:
            st.error(f"Solver failed: {result.message}")

with tab3:
    st.header("Sunrise & Sunset")

    col1, col2 = st.columns(2)
    with col1:
        latitude = st.number_input("Latitude", value=39.9, min_value=-90.0, max_value=90.0)
    with col2:
        longitude = st.number_input("Longitude", value=116.4, min_value=-180.0, max_value=180.0)
    day = st.date_input("Date", value=date.today())
    location = GeoCoordinate(latitude, longitude)

    try:
        rise, set_ = solar_events(location, day)
    except (ValueError, SolverError) as e:
        st.error(f"Error: {e}")
    else:
        if rise.success and set_.success:
            st.metric(label="Sunrise", value=rise.local_time.strftime("%H:%M"))
            st.metric(label="Sunset", value=set_.local_time.strftime("%H:%M"))
        else:
            st.warning(rise.message if not rise.success else set_.message)

    # Day length through the year; NaN where the sun never crosses the horizon
    jan1 = date(day.year, 1, 1)
    days = [jan1 + timedelta(days=i) for i in range(365)]
    lengths = []
    for d in days:
        r, s = solar_events(location, d)
        lengths.append(s.utc_hours - r.utc_hours if r.success and s.success else np.nan)

    df = pd.DataFrame({"date": days, "hours": lengths})
    fig_day = go.Figure()
    fig_day.add_trace(go.Scatter(x=df["date"], y=df["hours"], name="Day length", line=dict(color="orange")))
    fig_day.update_layout(title="Day Length", xaxis_title="Date", yaxis_title="Hours")
    st.plotly_chart(fig_day, use_container_width=True)

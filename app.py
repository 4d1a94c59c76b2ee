import logging

import pandas as pd
import streamlit as st

from relief_simplex import (
    ConfigurationError,
    InputError,
    SolverConfig,
    SolveStatus,
    build_problem,
    cross_check,
)
from relief_simplex.display import allocation_frame, closed_form_frame, formatted_tableau_frame
from relief_simplex.loader import read_table, sites_from_frame, stock_from_frame, template_bytes

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

DEFAULT_SITES = pd.DataFrame(
    [
        {"name": "Kabupaten Cianjur", "minimum_requirement": 500, "unit_cost": 55000},
        {"name": "Kabupaten Sumedang", "minimum_requirement": 350, "unit_cost": 45000},
        {"name": "Kabupaten Garut", "minimum_requirement": 200, "unit_cost": 35000},
    ]
)


def show_iterations(report, config):
    for snapshot in report.snapshots:
        label = "Initial Tableau" if snapshot.iteration == 0 else f"Iteration {snapshot.iteration}"
        if snapshot.is_optimal:
            label += " - Optimal"
        elif snapshot.status is not None:
            label += f" - {snapshot.status.value}"

        with st.expander(f"**{label}**", expanded=(snapshot.iteration == 0 or snapshot.is_terminal)):
            st.caption(snapshot.description)
            if snapshot.leaving is not None:
                col1, col2, col3, col4 = st.columns(4)
                with col1:
                    st.metric("Entering Variable", snapshot.entering)
                with col2:
                    st.metric("Leaving Variable", snapshot.leaving)
                with col3:
                    st.metric("Pivot Row", snapshot.pivot_row + 1)
                with col4:
                    st.metric("Pivot Column", snapshot.pivot_column + 1)

            df = formatted_tableau_frame(snapshot, config)

            def highlight_pivot(row):
                styles = [''] * len(row)
                if snapshot.pivot_row is not None and row.name == snapshot.basis[snapshot.pivot_row]:
                    styles[snapshot.pivot_column] = 'background-color: #ffeb3b; font-weight: bold'
                return styles

            st.dataframe(df.style.apply(highlight_pivot, axis=1), use_container_width=True)


def show_charts(frame):
    by_site = frame.set_index("site")
    col1, col2 = st.columns(2)
    with col1:
        st.markdown("**Minimum requirement vs. allocation**")
        st.bar_chart(by_site[["minimum_requirement", "allocated"]])
    with col2:
        st.markdown("**Distribution cost per site**")
        st.bar_chart(by_site[["cost"]])


def main():
    st.set_page_config(page_title="Relief Distribution Optimizer", layout="wide")
    st.title("Relief Packet Distribution (Big M Method)")

    with st.sidebar:
        st.header("Dataset")
        upload = st.file_uploader("Import sites (CSV or Excel)", type=["csv", "xlsx"])
        st.download_button("Template CSV", template_bytes("csv"),
                           file_name="template_dataset_distribusi.csv", mime="text/csv")
        st.download_button("Template Excel", template_bytes("xlsx"),
                           file_name="template_dataset_distribusi.xlsx", mime=XLSX_MIME)

    sites_df = DEFAULT_SITES
    default_stock = 1000.0
    if upload is not None:
        try:
            sites_df = read_table(upload)
            stock = stock_from_frame(sites_df)
        except InputError as exc:
            st.error(str(exc))
            return
        if stock is not None:
            default_stock = stock

    with st.sidebar:
        st.header("Stock & Solver")
        total_capacity = st.number_input("Total stock (packets)", min_value=0.0, value=default_stock, step=50.0)
        big_m = st.number_input("M value", min_value=1.0, value=1e6, format="%.0f")
        max_iterations = st.number_input("Maximum iterations", min_value=1, max_value=1000, value=100, step=1)

    st.subheader("Demand Sites")
    sites_df = st.data_editor(sites_df, num_rows="dynamic", use_container_width=True)

    if not st.button("Solve", type="primary"):
        st.info("Edit the sites and stock, then press Solve to see the simplex iterations.")
        return

    try:
        config = SolverConfig(big_m=big_m, max_iterations=int(max_iterations))
        problem = build_problem(sites_from_frame(sites_df), total_capacity)
    except (InputError, ConfigurationError) as exc:
        st.error(str(exc))
        return

    check = cross_check(problem, config)
    report = check.simplex

    st.subheader("Simplex Iterations")
    st.caption(
        f"Values above {config.display_threshold:,.0f} are shown as M; "
        "raise M to see larger real costs in full."
    )
    show_iterations(report, config)

    st.subheader("Result")
    if report.status is SolveStatus.OPTIMAL:
        st.success(report.message)
    elif report.status is SolveStatus.INFEASIBLE:
        st.warning(report.message)
    else:
        st.error(report.message)

    if report.status is not SolveStatus.NO_SITES:
        result_df = allocation_frame(problem, report)
        st.dataframe(result_df, use_container_width=True)
        col1, col2, col3 = st.columns(3)
        col1.metric("Total cost", f"{report.total_cost:,.2f}")
        col2.metric("Packets allocated", f"{report.total_allocated:,.0f}")
        col3.metric("Penalty (diagnostic)", f"{report.penalty_cost:,.0f}")
        show_charts(result_df)

    with st.expander("Closed-form cross-check", expanded=not check.agrees):
        st.write(check.closed_form.message)
        if problem.num_sites:
            st.dataframe(closed_form_frame(problem, check.closed_form), use_container_width=True)
        if check.agrees:
            st.success("Simplex and closed-form allocations agree.")
        else:
            for mismatch in check.mismatches:
                st.warning(mismatch)


if __name__ == "__main__":
    main()

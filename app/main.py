"""
Streamlit Frontend for the Finance Ledger

This is the interactive boundary: it collects input, hands it to the
orchestrator flows and reports results. It holds no business rules.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Invalid input is reported, never fatal
3. A failed load leaves the current ledger as it was
4. No hidden actions
"""

from datetime import date

import streamlit as st

from src.audit import configure_logging, create_correlation_id
from src.config import get_settings, validate_all_settings
from src.models.transaction import LedgerSummary, TransactionKind
from src.orchestrator import AppComponents, create_app_components
from src.services.storage import LedgerFileNotFoundError, LedgerIOError
from src.validation import ValidationError


# Page configuration
st.set_page_config(
    page_title="Finance Ledger",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)


@st.cache_resource
def get_components() -> AppComponents:
    """Get or create application components (cached)."""
    settings = get_settings()
    configure_logging(settings.app.log_level)
    components = create_app_components(settings=settings.ledger)

    if settings.ledger.create_sample_file:
        try:
            components.persistence_flow.ensure_sample_file(
                settings.ledger.default_filename
            )
        except LedgerIOError as e:
            st.warning(f"Failed to create sample file: {e}")

    return components


def render_summary(summary: LedgerSummary) -> None:
    """Show totals as three metrics plus the plain-text lines."""
    symbol = get_settings().ledger.currency_symbol

    st.subheader(summary.description)
    col1, col2, col3 = st.columns(3)
    col1.metric("Total Income", f"{symbol}{summary.total_income:,.2f}")
    col2.metric("Total Expense", f"{symbol}{summary.total_expense:,.2f}")
    col3.metric("Balance", f"{symbol}{summary.balance:,.2f}")

    if summary.is_empty:
        st.info("No transactions match this filter.")
    else:
        st.caption(f"{summary.transaction_count} transaction(s)")
        st.code("\n".join(summary.to_display_lines(symbol)), language=None)


def show_validation_error(error: ValidationError) -> None:
    for issue in error.issues:
        message = issue.message
        if issue.suggested_fix:
            message += f" {issue.suggested_fix}"
        st.error(message)


def main():
    """Main application entry point."""
    components = get_components()

    # Sidebar navigation
    st.sidebar.title("💰 Finance Ledger")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["➕ Add Transaction", "📊 View Summary", "💾 Save / Load", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.metric("Transactions", len(components.session.ledger))
    if components.session.last_file_path:
        st.sidebar.caption(f"File: {components.session.last_file_path}")

    # Route to appropriate page
    if page == "➕ Add Transaction":
        render_add_page(components)
    elif page == "📊 View Summary":
        render_summary_page(components)
    elif page == "💾 Save / Load":
        render_persistence_page(components)
    elif page == "⚙️ Settings":
        render_settings_page(components)


def render_add_page(components: AppComponents):
    """Render the add-transaction page."""
    st.title("➕ Add Transaction")

    policy = components.add_flow.validator.policy

    kind = st.radio(
        "Type",
        options=list(TransactionKind),
        format_func=lambda k: k.label,
        horizontal=True,
    )

    with st.form("add_transaction", clear_on_submit=True):
        category = st.selectbox("Category", options=list(policy.allowed_for(kind)))
        amount = st.text_input("Amount", placeholder="e.g. 250.00")
        entry_date = st.date_input("Date", value=date.today())
        submitted = st.form_submit_button("Add", type="primary")

    if submitted:
        try:
            transaction = components.add_flow.add_transaction(
                kind=kind,
                category=category,
                amount=amount,
                entry_date=entry_date,
            )
        except ValidationError as e:
            show_validation_error(e)
        else:
            st.success(f"Transaction added: {transaction.format()}")

    transactions = components.session.ledger.all()
    if transactions:
        st.markdown("---")
        st.subheader("Ledger")
        st.dataframe(
            [
                {
                    "Type": t.kind.label,
                    "Category": t.category,
                    "Amount": float(t.amount),
                    "Date": t.date.isoformat(),
                }
                for t in transactions
            ],
            use_container_width=True,
        )


def render_summary_page(components: AppComponents):
    """Render the summary page."""
    st.title("📊 View Summary")

    flow = components.summary_flow
    view = st.radio(
        "Summarize",
        ["By Month", "By Category", "By Date Range"],
        horizontal=True,
    )
    correlation_id = create_correlation_id()

    try:
        if view == "By Month":
            month = st.number_input("Month (1-12)", min_value=1, max_value=12, value=date.today().month)
            st.caption("Includes this month of every year in the ledger.")
            if st.button("Show Summary", type="primary"):
                render_summary(flow.month_summary(int(month), correlation_id=correlation_id))

        elif view == "By Category":
            category = st.text_input("Category", placeholder="e.g. Food")
            if st.button("Show Summary", type="primary") and category:
                render_summary(flow.category_summary(category, correlation_id=correlation_id))

        else:
            col1, col2 = st.columns(2)
            start = col1.date_input("Start date", value=date.today().replace(day=1))
            end = col2.date_input("End date", value=date.today())
            if st.button("Show Summary", type="primary"):
                render_summary(flow.date_range_summary(start, end, correlation_id=correlation_id))

    except ValidationError as e:
        show_validation_error(e)

    breakdown = flow.engine.breakdown_by_category()
    if breakdown:
        st.markdown("---")
        st.subheader("By category")
        symbol = get_settings().ledger.currency_symbol
        st.dataframe(
            [
                {
                    "Category": name,
                    "Income": f"{symbol}{s.total_income:,.2f}",
                    "Expense": f"{symbol}{s.total_expense:,.2f}",
                    "Balance": f"{symbol}{s.balance:,.2f}",
                }
                for name, s in breakdown.items()
            ],
            use_container_width=True,
        )


def render_persistence_page(components: AppComponents):
    """Render the save/load page."""
    st.title("💾 Save / Load")

    flow = components.persistence_flow
    default_name = get_settings().ledger.default_filename

    st.subheader("Save")
    save_name = st.text_input("File name to save", value=default_name, key="save_name")
    if st.button("Save to File", type="primary"):
        try:
            path = flow.save(save_name)
        except LedgerIOError as e:
            st.error(str(e))
        else:
            st.success(f"Data saved to {path}")

    st.markdown("---")
    st.subheader("Load")
    st.caption("Loading replaces every transaction currently in the ledger.")
    load_name = st.text_input("File name to load", value=default_name, key="load_name")
    if st.button("Load from File"):
        try:
            report = flow.load(load_name)
        except LedgerFileNotFoundError as e:
            st.error(f"{e}. The current ledger was kept.")
        except LedgerIOError as e:
            st.error(str(e))
        else:
            st.success(f"Loaded {len(report.transactions)} transaction(s)")
            for skipped in report.skipped:
                st.warning(
                    f"Skipping invalid entry (line {skipped.line_index + 1}): "
                    f"{skipped.raw_line!r} - {skipped.reason}"
                )


def render_settings_page(components: AppComponents):
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")

    status = validate_all_settings()
    sections = [
        ("Ledger file", "ledger"),
        ("Categories", "categories"),
        ("Application", "app"),
    ]
    for name, key in sections:
        if status.get(key, False):
            st.success(f"✅ {name}")
        else:
            st.error(f"❌ {name} - {status.get(f'{key}_error', 'Not configured')}")

    settings = get_settings()
    st.markdown(f"**Data directory:** `{settings.ledger.data_dir}`")
    policy = components.add_flow.validator.policy
    st.markdown(f"**Income categories:** {', '.join(policy.income)}")
    st.markdown(f"**Expense categories:** {', '.join(policy.expense)}")

    st.markdown("---")
    st.markdown("### Recent Activity")
    storage = components.audit_logger.storage
    events = storage.get_recent_events(limit=20) if storage is not None else []
    if not events:
        st.info("Nothing recorded yet.")
    for event in events:
        st.markdown(
            f"`{event.timestamp:%H:%M:%S}` **{event.event_type.value}** - {event.description}"
        )


if __name__ == "__main__":
    main()

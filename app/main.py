"""
Streamlit Frontend for Expense Tracker

This is the user interface for recording and reviewing income and
expenses.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Explicit confirmation before anything is deleted
3. Clear error messages next to the field that caused them
4. Visual feedback for all operations
5. No business logic here - everything comes from the tracker

Navigation (Overview / Transactions / Add) is UI state only and lives in
the Streamlit session. Filters and data live in the tracker.
"""

from datetime import date

import streamlit as st

from expense_tracker.config import get_settings
from expense_tracker.events import configure_logging
from expense_tracker.formatting import (
    category_icon,
    category_label,
    category_markup,
    format_currency,
    format_date,
    format_signed_amount,
)
from expense_tracker.models import (
    LedgerEvent,
    LedgerEventType,
    ThemePreference,
    Transaction,
    TransactionCategory,
    TransactionType,
)
from expense_tracker.queries import ALL
from expense_tracker.services.storage import StorageError
from expense_tracker.tracker import ExpenseTracker, create_tracker
from expense_tracker.validation import ValidationError


VIEWS = {
    "overview": "📊 Overview",
    "transactions": "📋 All Transactions",
    "add": "➕ Add Transaction",
}

NOTIFICATIONS = {
    LedgerEventType.TRANSACTION_ADDED: ("Transaction added successfully!", "✅"),
    LedgerEventType.TRANSACTION_DELETED: ("Transaction deleted!", "🗑️"),
    LedgerEventType.LEDGER_CLEARED: ("All transactions cleared!", "🧹"),
    LedgerEventType.LOAD_DEGRADED: ("Saved data could not be read, starting fresh.", "⚠️"),
}

THEME_CSS = {
    ThemePreference.LIGHT: """
<style>
    .income { color: #28a745; font-weight: bold; }
    .expense { color: #dc3545; font-weight: bold; }
    .txn-meta { color: #6c757d; font-size: 0.9em; }
</style>
""",
    ThemePreference.DARK: """
<style>
    .stApp { background-color: #1e1e2e; color: #e0e0e0; }
    .income { color: #4ade80; font-weight: bold; }
    .expense { color: #f87171; font-weight: bold; }
    .txn-meta { color: #a0a0b0; font-size: 0.9em; }
</style>
""",
}


# Page configuration
st.set_page_config(
    page_title="Expense Tracker",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)


@st.cache_resource
def get_notifications() -> list:
    """Pending notifications produced by ledger events (shared, cached)."""
    return []


@st.cache_resource
def get_tracker() -> ExpenseTracker:
    """Create the one tracker instance for this process (cached)."""
    settings = get_settings()
    configure_logging(settings.log_level)

    notifications = get_notifications()

    def notify(event: LedgerEvent) -> None:
        if event.event_type in NOTIFICATIONS:
            notifications.append(NOTIFICATIONS[event.event_type])

    return create_tracker(settings, subscribers=[notify])


def signed(amount, symbol: str) -> str:
    """Balances can go negative; format_currency never shows a sign."""
    return ("-" if amount < 0 else "") + format_currency(amount, symbol)


def show_notifications() -> None:
    notifications = get_notifications()
    while notifications:
        message, icon = notifications.pop(0)
        st.toast(message, icon=icon)


def main():
    """Main application entry point."""
    tracker = get_tracker()
    settings = get_settings()

    if "current_view" not in st.session_state:
        st.session_state.current_view = "overview"
    if "next_view" in st.session_state:
        # Widget-bound state can only change before the widget is drawn
        st.session_state.current_view = st.session_state.pop("next_view")

    st.markdown(THEME_CSS[tracker.get_theme()], unsafe_allow_html=True)

    # Sidebar navigation
    st.sidebar.title("💰 Expense Tracker")
    st.sidebar.caption(f"{date.today():%A, %B %d, %Y}")
    st.sidebar.markdown("---")

    view = st.sidebar.radio(
        "Navigate to:",
        list(VIEWS),
        format_func=VIEWS.get,
        key="current_view",
    )

    st.sidebar.markdown("---")
    theme = tracker.get_theme()
    toggle_label = "☀️ Light Mode" if theme == ThemePreference.DARK else "🌙 Dark Mode"
    if st.sidebar.button(toggle_label):
        try:
            tracker.toggle_theme()
        except StorageError as e:
            st.sidebar.error(f"Could not save theme: {e}")
        st.rerun()

    show_notifications()

    # Route to appropriate page
    if view == "overview":
        render_overview_page(tracker, settings.currency_symbol)
    elif view == "transactions":
        render_transactions_page(tracker, settings.currency_symbol)
    elif view == "add":
        render_add_page(tracker)


def render_transaction(
    transaction: Transaction,
    symbol: str,
    allow_delete: bool = False,
) -> None:
    """Render one transaction row."""
    css_class = transaction.type.value
    col1, col2, col3 = st.columns([6, 3, 1])

    with col1:
        st.markdown(f"**{transaction.title}**")
        st.markdown(
            f'<span class="txn-meta">{category_markup(transaction.category)} · {format_date(transaction.date)}</span>',
            unsafe_allow_html=True,
        )

    with col2:
        st.markdown(
            f'<span class="{css_class}">{format_signed_amount(transaction, symbol)}</span>',
            unsafe_allow_html=True,
        )

    if allow_delete:
        with col3:
            if st.button("🗑️", key=f"delete-{transaction.id}", help="Delete"):
                st.session_state.pending_delete = transaction.id
                st.rerun()


def render_overview_page(tracker: ExpenseTracker, symbol: str):
    """Render the overview page."""
    st.title("📊 Overview")

    # Summary cards
    summary = tracker.get_totals()
    col1, col2, col3 = st.columns(3)
    col1.metric("Total Balance", signed(summary.balance, symbol))
    col2.metric("Total Income", format_currency(summary.income, symbol))
    col3.metric("Total Expenses", format_currency(summary.expenses, symbol))

    if not tracker.filters.is_default:
        st.caption("Totals reflect the type and category filters on the Transactions page.")

    st.markdown("---")

    # Monthly summary
    st.markdown("### 📅 Monthly Summary")
    months = tracker.get_observed_months()
    options = [ALL] + months
    current = tracker.filters.month
    index = options.index(current) if current in options else 0

    selected = st.selectbox(
        "Month",
        options=options,
        index=index,
        format_func=lambda m: "All Time" if m == ALL else m.label,
    )
    if selected != current:
        tracker.set_filter(month=selected)

    stats = tracker.get_monthly_stats()
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Transactions", stats.count)
    col2.metric("Income", format_currency(stats.income, symbol))
    col3.metric("Expenses", format_currency(stats.expenses, symbol))
    col4.metric("Net", signed(stats.net, symbol))

    st.markdown("---")

    # Recent transactions
    st.markdown("### 🕒 Recent Transactions")
    recent = tracker.get_recent_transactions()
    if not recent:
        st.info("No transactions yet. Add your first transaction!")
    for transaction in recent:
        render_transaction(transaction, symbol)

    breakdown = tracker.get_category_breakdown()
    if breakdown:
        st.markdown("### 🧾 Spending by Category")
        for category, amount in breakdown.items():
            st.markdown(
                f"{category_icon(category)} {category_label(category)}: "
                f"**{format_currency(amount, symbol)}**"
            )


def render_transactions_page(tracker: ExpenseTracker, symbol: str):
    """Render the filtered transaction list."""
    st.title("📋 All Transactions")

    # Filters
    col1, col2 = st.columns(2)

    type_options = [ALL] + [t.value for t in TransactionType]
    with col1:
        type_filter = st.selectbox(
            "Filter by Type",
            options=type_options,
            index=type_options.index(getattr(tracker.filters.type, "value", tracker.filters.type)),
            format_func=lambda x: "All Types" if x == ALL else x.title(),
        )

    category_options = [ALL] + [c.value for c in TransactionCategory]
    if tracker.filters.category not in category_options:
        category_options.append(tracker.filters.category)
    with col2:
        category_filter = st.selectbox(
            "Filter by Category",
            options=category_options,
            index=category_options.index(tracker.filters.category),
            format_func=lambda x: "All Categories" if x == ALL else category_label(x),
        )

    tracker.set_filter(type=type_filter, category=category_filter)

    # Two-step delete: the button only records intent
    pending = st.session_state.get("pending_delete")
    if pending:
        target = tracker.ledger.get(pending)
        name = target.title if target else "this transaction"
        st.warning(f"Are you sure you want to delete **{name}**?")
        yes, no = st.columns(2)
        if yes.button("Yes, delete", type="primary"):
            st.session_state.pending_delete = None
            try:
                tracker.delete_transaction(pending)
            except StorageError as e:
                st.error(f"Could not delete: {e}")
            st.rerun()
        if no.button("Cancel"):
            st.session_state.pending_delete = None
            st.rerun()

    st.markdown("---")

    filtered = tracker.get_filtered_transactions()
    if not filtered:
        st.info("No transactions found.")
    for transaction in filtered:
        render_transaction(transaction, symbol, allow_delete=True)

    st.markdown("---")

    if st.session_state.get("confirm_clear"):
        st.error("Are you sure you want to clear all transactions? This action cannot be undone.")
        yes, no = st.columns(2)
        if yes.button("Yes, clear everything", type="primary"):
            st.session_state.confirm_clear = False
            try:
                tracker.clear_all()
            except StorageError as e:
                st.error(f"Could not clear: {e}")
            st.rerun()
        if no.button("Keep my data"):
            st.session_state.confirm_clear = False
            st.rerun()
    elif st.button("🧹 Clear All", disabled=not tracker.transactions):
        st.session_state.confirm_clear = True
        st.rerun()


def render_add_page(tracker: ExpenseTracker):
    """Render the add transaction form."""
    st.title("➕ Add Transaction")

    errors = st.session_state.get("form_errors", {})

    with st.form("transaction_form", clear_on_submit=False):
        title = st.text_input("Title", placeholder="e.g., Groceries")
        if "title" in errors:
            st.error(errors["title"])

        amount = st.text_input("Amount", placeholder="0.00")
        if "amount" in errors:
            st.error(errors["amount"])

        txn_type = st.selectbox(
            "Type",
            options=[t.value for t in TransactionType],
            format_func=str.title,
        )

        category = st.selectbox(
            "Category",
            options=[c.value for c in TransactionCategory],
            format_func=lambda c: f"{category_icon(c)} {category_label(c)}",
        )
        if "category" in errors:
            st.error(errors["category"])

        day = st.date_input("Date", value=date.today())
        if "date" in errors:
            st.error(errors["date"])

        submitted = st.form_submit_button("💾 Add Transaction", type="primary")

    if submitted:
        try:
            tracker.add_transaction({
                "title": title,
                "amount": amount,
                "type": txn_type,
                "category": category,
                "date": day,
            })
        except ValidationError as e:
            st.session_state.form_errors = e.messages_by_field()
            st.rerun()
        except StorageError as e:
            st.error(f"Could not save the transaction: {e}")
        else:
            st.session_state.form_errors = {}
            st.session_state.next_view = "overview"
            st.rerun()


if __name__ == "__main__":
    main()

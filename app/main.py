"""
Streamlit Frontend for Savings Party

This is the screen people open when they put money aside.

DESIGN PRINCIPLES:
1. The party is always visible at a glance
2. Every deposit gives feedback (level bar, level-up, evolution)
3. Withdrawals are allowed and never punished beyond the number dropping
4. Nothing is hidden: every change shows up in the activity feed

All state changes go through SavingsTrackerFlow; this file only renders.
"""

import streamlit as st

from savings_party.catalog import GENERATION_NAMES
from savings_party.config import validate_all_settings
from savings_party.models.savings import CURRENCIES, TransitionEvent
from savings_party.orchestrator import SavingsTrackerFlow, create_app_components
from savings_party.progression import (
    format_currency,
    level_description,
    savings_to_evolution,
)


# Page configuration
st.set_page_config(
    page_title="Savings Party",
    page_icon="🥚",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .success-box {
        padding: 20px;
        background-color: #d4edda;
        border-radius: 10px;
        border-left: 5px solid #28a745;
        margin: 10px 0;
    }
    .evolve-box {
        padding: 20px;
        background-color: #fff3cd;
        border-radius: 10px;
        border-left: 5px solid #ffc107;
        margin: 10px 0;
    }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
        color: #2c3e50;
    }
</style>
""", unsafe_allow_html=True)


@st.cache_resource
def get_flow() -> SavingsTrackerFlow:
    """Get or create application components (cached)."""
    try:
        return create_app_components(use_storage=True)
    except Exception as e:
        st.error(f"Failed to initialize storage: {e}")
        return create_app_components(use_storage=False)


def main():
    """Main application entry point."""
    flow = get_flow()

    # Sidebar navigation
    st.sidebar.title("🥚 Savings Party")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["🎒 Party", "➕ New Goal", "🏆 Achievements", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        f"""
        **Party:** {len(flow.engine.list_accounts())} / {flow.engine.max_accounts}

        **Total saved:** {format_currency(flow.engine.total_saved_all_accounts(),
                                          flow.preferences.get().currency)}
        """
    )

    if page == "🎒 Party":
        render_party_page(flow)
    elif page == "➕ New Goal":
        render_new_goal_page(flow)
    elif page == "🏆 Achievements":
        render_achievements_page(flow)
    elif page == "⚙️ Settings":
        render_settings_page(flow)

    for achievement_id in flow.pop_unlocked():
        st.toast(f"🏆 Achievement unlocked: {achievement_id.value.replace('_', ' ').title()}")


def render_transition(event: TransitionEvent, flow: SavingsTrackerFlow):
    """Show the level-up / evolution notice returned by a deposit."""
    account = flow.engine.get_account(event.account_id)
    if account is None:
        return
    line = flow.catalog.resolve(account.creature_ref)

    if event.evolved and line:
        old_form = line.stage(event.old_stage)
        new_form = line.stage(event.new_stage)
        st.markdown(f"""
        <div class="evolve-box">
            <h3>✨ What? {old_form.name} is evolving!</h3>
            <p>Congratulations! {account.nickname} evolved into <strong>{new_form.name}</strong>!</p>
        </div>
        """, unsafe_allow_html=True)
        st.image(new_form.sprite_url, width=120)
        st.balloons()
    else:
        st.markdown(f"""
        <div class="success-box">
            <h4>⬆️ {account.nickname} grew to Lv. {event.new_level}!</h4>
            <p>Up from Lv. {event.old_level}</p>
        </div>
        """, unsafe_allow_html=True)


def render_party_page(flow: SavingsTrackerFlow):
    """Render the party overview and the selected member's detail."""
    st.title("🎒 Your Party")

    currency = flow.preferences.get().currency
    members = flow.engine.accounts_with_stats()

    if not members:
        st.info("Your party is empty. Add a savings goal on the '➕ New Goal' page.")
        return

    if "last_transition" in st.session_state and st.session_state.last_transition:
        render_transition(st.session_state.last_transition, flow)
        st.session_state.last_transition = None

    cols = st.columns(3)
    for i, member in enumerate(members):
        account, stats, line = member.account, member.stats, member.creature
        with cols[i % 3]:
            if line:
                st.image(line.stage(stats.evolution_stage).sprite_url, width=96)
            st.markdown(f"**{account.nickname}** · Lv. {stats.level}")
            st.progress(min(stats.progress_percentage, 100.0) / 100)
            st.caption(
                f"{format_currency(stats.total_saved, currency)} / "
                f"{format_currency(account.target_amount, currency)} "
                f"({stats.progress_percentage}%)"
            )

    st.markdown("---")

    selected = st.selectbox(
        "Open a party member",
        options=[m.account.id for m in members],
        format_func=lambda aid: next(m.account.nickname for m in members if m.account.id == aid),
    )
    member = next(m for m in members if m.account.id == selected)
    render_detail(flow, member)


def render_detail(flow: SavingsTrackerFlow, member):
    """Detail view: stats, deposit/withdraw form, entry history."""
    account, stats, line = member.account, member.stats, member.creature
    currency = flow.preferences.get().currency

    col1, col2 = st.columns([1, 2])

    with col1:
        if line:
            form = line.stage(stats.evolution_stage)
            st.image(form.animated_sprite_url, width=160)
            st.caption(f"{form.name} · {line.type.title()} · {GENERATION_NAMES.get(line.generation, '')}")

    with col2:
        st.subheader(f"{account.nickname} · Lv. {stats.level}")
        st.markdown(f"*{level_description(stats.level)}*")
        st.progress(stats.exp_percentage / 100, text=f"EXP {stats.exp_percentage}%")
        st.markdown(
            f'<div class="big-number">{format_currency(stats.total_saved, currency)}</div>',
            unsafe_allow_html=True,
        )
        if stats.level < 100:
            st.caption(f"{format_currency(stats.exp_to_next_level, currency)} to next level")
        for stage in (1, 2):
            if stats.evolution_stage < stage:
                needed = savings_to_evolution(stats.total_saved, account.target_amount, stage)
                st.caption(f"{format_currency(needed, currency)} until evolution stage {stage}")
                break

    with st.form(f"entry-{account.id}", clear_on_submit=True):
        amount = st.number_input("Amount", min_value=0.0, step=1.0, format="%.2f")
        note = st.text_input("Note (optional)")
        deposit_col, withdraw_col = st.columns(2)
        deposit = deposit_col.form_submit_button("💰 Deposit", type="primary")
        withdraw = withdraw_col.form_submit_button("💸 Withdraw")

    if (deposit or withdraw) and amount > 0:
        signed = amount if deposit else -amount
        st.session_state.last_transition = flow.add_entry(account.id, signed, note)
        st.rerun()

    if account.entries:
        st.markdown("### History")
        for entry in reversed(account.entries):
            c1, c2, c3 = st.columns([2, 3, 1])
            c1.write(format_currency(entry.amount, currency))
            c2.write(f"{entry.created_at:%d %b %Y} {entry.note or ''}")
            if c3.button("🗑️", key=f"del-{entry.id}"):
                flow.delete_entry(account.id, entry.id)
                st.rerun()

    themes = ["default", "forest", "beach", "cave", "space", "city"]
    current = account.background.theme if account.background else "default"
    theme = st.selectbox(
        "Card background",
        options=themes,
        index=themes.index(current) if current in themes else 0,
        key=f"bg-{account.id}",
    )
    if theme != current:
        flow.update_background(account.id, theme)
        st.rerun()

    with st.expander("⚠️ Release"):
        st.warning("Releasing deletes this goal and all of its entries.")
        if st.button(f"Release {account.nickname}", key=f"release-{account.id}"):
            flow.delete_account(account.id)
            st.rerun()


def render_new_goal_page(flow: SavingsTrackerFlow):
    """Pick a creature and a target."""
    st.title("➕ New Goal")

    if not flow.engine.can_add_account():
        st.error("Your party is full. Release a member before adding a new goal.")
        return

    st.markdown(f"{flow.engine.available_slots()} slot(s) left in your party.")

    lines = flow.catalog.all()
    creature_ref = st.selectbox(
        "Choose your partner",
        options=[line.id for line in lines],
        format_func=lambda ref: next(
            f"{l.name} (Gen {l.generation}, {l.type}){' - Hisuian' if l.is_hisuian else ''}"
            for l in lines if l.id == ref
        ),
    )
    line = flow.catalog.resolve(creature_ref)
    if line:
        cols = st.columns(3)
        for col, stage in zip(cols, line.stages):
            col.image(stage.sprite_url, caption=stage.name, width=96)

    nickname = st.text_input("Nickname", placeholder=line.base_name if line else "")
    target = st.number_input("Savings goal", min_value=0.01, value=100.0, step=10.0)

    if st.button("🥚 Start saving", type="primary"):
        account = flow.create_account(creature_ref, nickname, target)
        if account is None:
            st.error("Could not add this goal.")
        else:
            st.success(f"{account.nickname} joined your party!")


def render_achievements_page(flow: SavingsTrackerFlow):
    """Achievements and the activity feed."""
    st.title("🏆 Achievements")

    tracker = flow.achievements
    st.progress(tracker.completion_percentage() / 100,
                text=f"{tracker.unlocked_count()} unlocked")

    for status in tracker.statuses(flow.engine.accounts_with_stats()):
        a = status.achievement
        icon = a.icon if status.is_unlocked else "🔒"
        line = f"{icon} **{a.name}** · {a.description}"
        if status.progress and not status.is_unlocked:
            current, target = status.progress
            line += f" ({current:g} / {target:g})"
        st.markdown(line)

    st.markdown("---")
    st.subheader("Recent activity")
    for event in flow.activity.recent(limit=20):
        st.caption(f"{event.timestamp:%d %b %H:%M} · {event.description}")


def render_settings_page(flow: SavingsTrackerFlow):
    """Render the settings page."""
    st.title("⚙️ Settings")

    prefs = flow.preferences.get()
    codes = [c.code for c in CURRENCIES]
    code = st.selectbox(
        "Currency",
        options=codes,
        index=codes.index(prefs.currency.code) if prefs.currency.code in codes else 0,
        format_func=lambda c: next(f"{x.symbol} {x.name}" for x in CURRENCIES if x.code == c),
    )
    sound_enabled = st.checkbox("Sound effects", value=prefs.sound_enabled)
    sound_volume = st.slider("Volume", 0, 100, prefs.sound_volume, disabled=not sound_enabled)

    col1, col2 = st.columns(2)
    if col1.button("💾 Save", type="primary"):
        flow.preferences.set_currency(code)
        flow.update_settings(sound_enabled=sound_enabled, sound_volume=sound_volume)
        st.success("Settings saved")
    if col2.button("↩️ Reset to defaults"):
        flow.reset_settings()
        st.rerun()

    st.markdown("---")
    st.markdown("### Configuration Status")

    status = validate_all_settings()
    for key in ("app", "storage", "logging"):
        if status.get(key, False):
            st.success(f"✅ {key.title()} settings OK")
        else:
            st.error(f"❌ {key.title()} - {status.get(f'{key}_error', 'Not configured')}")

    if flow.engine.last_storage_error:
        st.error(f"Last save failed: {flow.engine.last_storage_error}")


if __name__ == "__main__":
    main()

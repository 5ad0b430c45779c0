# streamlit_app/app.py
import streamlit as st
import requests
import matplotlib.pyplot as plt
import pandas as pd
from datetime import date

from ecozync import storage
from ecozync.config import settings
from ecozync.survey import QUESTIONS, answer_question

API_BASE = settings.api_base.rstrip("/")

CATEGORY_LABELS = {
    "transport_emissions": "Transport",
    "energy_emissions": "Energy",
    "diet_emissions": "Diet",
    "lifestyle_emissions": "Lifestyle",
    "travel_emissions": "Flights",
    "other_emissions": "Waste",
}

st.set_page_config(page_title="Ecozync", layout="wide", initial_sidebar_state="expanded")

# -------------------------------
# Helpers
# -------------------------------
def post_json(path: str, payload: dict, params: dict = None):
    resp = requests.post(API_BASE + path, json=payload, params=params or {}, timeout=30)
    resp.raise_for_status()
    return resp.json()

def get_json(path: str, params: dict = None):
    resp = requests.get(API_BASE + path, params=params or {}, timeout=30)
    resp.raise_for_status()
    return resp.json()

def sign_in(data: dict):
    st.session_state["token"] = data.get("token")
    st.session_state["user_info"] = {k: data.get(k) for k in ("user_id", "first_name", "last_name", "email")}
    save_pending_calculation()

def save_pending_calculation():
    """Push a result calculated before signing in to the new account."""
    pending = storage.get_pending_calculation()
    if not pending:
        return
    results = pending["results"]
    payload = {k: results[k] for k in CATEGORY_LABELS}
    payload.update({
        "calculation_date": date.today().isoformat(),
        "assessment_data": pending.get("assessment_data") or {},
        "calculation_method": results.get("calculation_method"),
        "calculation_confidence": results.get("confidence_score", 0.9),
    })
    try:
        post_json("/calculations", payload, params={"token": st.session_state["token"]})
        storage.clear_pending_calculation()
        st.sidebar.success("Your last result was saved to your account")
    except requests.RequestException as e:
        st.sidebar.warning(f"Could not save your last result: {e}")

def breakdown_chart(results: dict):
    labels = [CATEGORY_LABELS[k] for k in CATEGORY_LABELS]
    values = [results[k] for k in CATEGORY_LABELS]
    fig, ax = plt.subplots(figsize=(8, 3))
    ax.barh(labels, values)
    ax.set_xlabel("kg CO2e / year")
    ax.grid(alpha=0.2)
    st.pyplot(fig)

def show_results(payload: dict):
    results, impact, comp = payload["results"], payload["impact"], payload["comparisons"]
    st.subheader(f"{results['total_emissions']:,} kg CO2e per year")
    st.markdown(f"<span style='color:{impact['color']}'>**{impact['level']} Impact Level**</span>",
                unsafe_allow_html=True)
    st.write(impact["message"])
    breakdown_chart(results)
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("vs EU average", f"{comp['vs_eu_average']:+.0f}%")
    c2.metric("vs global average", f"{comp['vs_global_average']:+.0f}%")
    c3.metric("vs Paris target", f"{comp['vs_paris_target']:+.0f}%")
    c4.metric("Trees to offset", comp["trees_to_offset"])

# -------------------------------
# Sidebar: Auth (Signup / Login)
# -------------------------------
for key, default in (("token", None), ("user_info", None), ("step", 0), ("result", None)):
    if key not in st.session_state:
        st.session_state[key] = default
if "assessment" not in st.session_state:
    st.session_state["assessment"] = storage.get_assessment_data() or {}

st.sidebar.title("Account")
mode = st.sidebar.radio("Account action", ["Login", "Signup", "Profile"])

if mode == "Signup":
    with st.sidebar.form("signup_form"):
        first = st.text_input("First name")
        last = st.text_input("Last name")
        email = st.text_input("Email")
        pwd = st.text_input("Password", type="password")
        if st.form_submit_button("Create account"):
            try:
                sign_in(post_json("/signup", {"first_name": first, "last_name": last, "email": email, "password": pwd}))
                st.success("Account created - logged in")
            except requests.RequestException as e:
                st.error(f"Signup failed: {e}")

elif mode == "Login":
    with st.sidebar.form("login_form"):
        email = st.text_input("Email")
        pwd = st.text_input("Password", type="password")
        if st.form_submit_button("Login"):
            try:
                sign_in(post_json("/login", {"email": email, "password": pwd}))
                st.success("Logged in")
            except requests.RequestException as e:
                st.error(f"Login failed: {e}")

else:
    if st.session_state["user_info"]:
        st.sidebar.write("Logged in as", st.session_state["user_info"]["first_name"])
        if st.sidebar.button("Logout"):
            st.session_state["token"] = None
            st.session_state["user_info"] = None
            st.rerun()
    else:
        st.sidebar.info("Log in to keep your results. Without an account the last "
                        f"{storage.HISTORY_LIMIT} results stay on this device.")
        if storage.has_stored_data() and st.sidebar.button("Forget results on this device"):
            storage.clear_all_data()
            st.rerun()

token = st.session_state["token"]

tab_survey, tab_history, tab_stats = st.tabs(["Calculator", "History", "Progress"])

# -------------------------------
# Calculator: one question per step
# -------------------------------
with tab_survey:
    st.header("Your carbon footprint")
    step = st.session_state["step"]
    assessment = st.session_state["assessment"]

    if st.session_state["result"]:
        show_results(st.session_state["result"])
        if st.button("Start again"):
            st.session_state.update(step=0, result=None, assessment={})
            storage.clear_assessment_data()
            st.rerun()
    else:
        question = QUESTIONS[step]
        st.progress((step + 1) / len(QUESTIONS), text=f"Question {step + 1} of {len(QUESTIONS)}")
        st.subheader(question["title"])
        options = question["options"]
        current = (assessment.get(question["section"]) or {}).get(question["field"])
        values = [o["value"] for o in options]
        choice = st.radio(
            "Choose one",
            values,
            index=values.index(current) if current in values else 0,
            format_func=lambda v: next(f"{o['label']} - {o['description']} ({o['impact']} impact)"
                                       for o in options if o["value"] == v),
            key=f"q{question['id']}",
        )
        back, nxt = st.columns(2)
        if back.button("Back", disabled=step == 0):
            st.session_state["step"] = step - 1
            st.rerun()
        last_step = step == len(QUESTIONS) - 1
        if nxt.button("Calculate" if last_step else "Next"):
            assessment = answer_question(assessment, question, choice)
            st.session_state["assessment"] = assessment
            storage.save_assessment_data(assessment)
            if not last_step:
                st.session_state["step"] = step + 1
                st.rerun()
            try:
                result = post_json("/assessments", assessment, params={"token": token} if token else None)
            except requests.RequestException as e:
                st.error("Failed to calculate your carbon footprint. Please try again. " + str(e))
            else:
                if result.get("saved"):
                    st.success("Your carbon footprint has been calculated and saved to your account.")
                else:
                    storage.save_calculation(result["results"], assessment)
                    storage.store_pending_calculation(result["results"], assessment)
                    st.info("Sign up to save your results and track progress over time.")
                st.session_state["result"] = result
                st.rerun()

# -------------------------------
# History
# -------------------------------
with tab_history:
    st.header("History")
    if token:
        try:
            rows = get_json("/calculations", {"token": token, "page_size": 100}).get("data", [])
        except requests.RequestException as e:
            st.error("Could not fetch history: " + str(e))
            rows = []
    else:
        rows = [dict(r["results"], calculation_date=r["date"][:10]) for r in storage.get_calculation_history()]
    if rows:
        df = pd.DataFrame(rows)
        df["calculation_date"] = pd.to_datetime(df["calculation_date"])
        df = df.sort_values("calculation_date")
        fig, ax = plt.subplots(figsize=(8, 3))
        ax.plot(df["calculation_date"], df["total_emissions"], marker="o")
        ax.set_title("Total emissions over time")
        ax.set_ylabel("kg CO2e / year")
        ax.grid(alpha=0.2)
        st.pyplot(fig)
        st.dataframe(df[["calculation_date", "total_emissions", *CATEGORY_LABELS]]
                     .sort_values("calculation_date", ascending=False).reset_index(drop=True))
    else:
        st.info("No calculations yet")

# -------------------------------
# Progress (signed-in users)
# -------------------------------
with tab_stats:
    st.header("Progress")
    if not token:
        st.info("Log in to see your progress over time.")
    else:
        try:
            stats = get_json("/calculations/stats", {"token": token})
        except requests.RequestException as e:
            st.error("Could not fetch stats: " + str(e))
            stats = None
        if stats and stats["total_calculations"]:
            c1, c2, c3 = st.columns(3)
            c1.metric("Calculations", stats["total_calculations"])
            c2.metric("Average (kg CO2e/yr)", stats["avg_total_emissions"])
            progress = stats["reduction_progress"]
            c3.metric("Reduction since first", f"{progress['reduction_percentage']:.1f}%" if progress else "n/a")
            trend = pd.DataFrame(stats["monthly_trend"])
            if not trend.empty:
                fig, ax = plt.subplots(figsize=(8, 3))
                ax.bar(trend["month"], trend["avg_emissions"])
                ax.set_title("Monthly average")
                st.pyplot(fig)
            share = stats["category_breakdown"]
            if sum(share.values()) > 0:
                fig, ax = plt.subplots()
                ax.pie(list(share.values()), labels=[k.split("_")[0] for k in share], autopct="%1.1f%%")
                st.pyplot(fig)
        else:
            st.info("No calculations yet")

import streamlit as st
from pydantic import ValidationError

import bedtime_config as config
from bedtime import (
    DEFAULT_COFFEE_AMOUNT, DEFAULT_SLEEP_AMOUNT, DEFAULT_WAKE_TIME,
    MAX_COFFEE, MAX_SLEEP, MIN_COFFEE, MIN_SLEEP, SLEEP_STEP,
    ModelError, SleepInputs, bedtime_alert, bedtime_label,
    format_coffee, format_sleep_amount, load_predictor,
)

config.configure_logging()


@st.cache_resource
def predictor_or_none(model_path):
    """Loaded once per model path; a failed load is cached as None."""
    try:
        return load_predictor(model_path)
    except ModelError:
        return None


# -----------------------------
# Form
# -----------------------------
st.set_page_config(page_title="BetterRest", layout="centered")
st.title("BetterRest")

predictor = predictor_or_none(config.MODEL_FILE)

st.subheader("Desired wake-up time")
wake_up = st.time_input("Please enter a time", value=DEFAULT_WAKE_TIME, step=60,
                        label_visibility="collapsed")

st.subheader("Desired amount of sleep")
sleep_amount = st.number_input("Hours of sleep", min_value=MIN_SLEEP, max_value=MAX_SLEEP,
                               value=DEFAULT_SLEEP_AMOUNT, step=SLEEP_STEP, format="%.2f")
st.caption(format_sleep_amount(sleep_amount))

st.subheader("Daily coffee intake")
coffee_options = list(range(MIN_COFFEE, MAX_COFFEE + 1))
coffee_amount = st.selectbox("Daily coffee intake", coffee_options,
                             index=coffee_options.index(DEFAULT_COFFEE_AMOUNT),
                             format_func=format_coffee, label_visibility="collapsed")

try:
    inputs = SleepInputs(wake_time=wake_up, sleep_amount=sleep_amount, coffee_amount=coffee_amount)
except ValidationError as e:
    st.warning(f"Please check your inputs: {e.errors()[0]['msg']}")
    st.stop()

st.subheader("Recommended bedtime")
st.markdown(f"### {bedtime_label(predictor, inputs)}")

if st.button("Calculate"):
    alert = bedtime_alert(predictor, inputs)
    if alert.ok:
        st.success(f"**{alert.title}** {alert.message}")
    else:
        st.error(f"**{alert.title}** {alert.message}")

import logging

import streamlit as st

from src.config import LOG_FORMAT, LOG_LEVEL
from src.exceptions import ConfigurationError, InferenceFailure, InvalidInputError
from src.models.predict import PricePredictor, describe, format_price

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
logger = logging.getLogger(__name__)

st.set_page_config(page_title="Used Car Price Predictor", layout="centered")
st.title("Used Car Price Predictor")


@st.cache_resource
def load_predictor() -> PricePredictor:
    return PricePredictor.from_files()


try:
    with st.spinner("Analyzing model..."):
        predictor = load_predictor()
except ConfigurationError as e:
    logger.error("Failed to load model: %s", e)
    st.error(f"System Error: {e}")
    st.stop()

st.caption("Model Ready")

FIELD_LABELS = {
    "model": "Model",
    "condition": "Condition",
    "cylinders": "Cylinders",
    "fuel": "Fuel",
    "odometer": "Odometer",
    "transmission": "Transmission",
    "drive": "Drive",
    "year": "Year",
}

with st.form("prediction-form"):
    # Free text is allowed; unknown names fall back to the default frequency.
    model_name = st.selectbox(
        FIELD_LABELS["model"],
        predictor.model_names(),
        index=None,
        placeholder="e.g. f-150",
        accept_new_options=True,
    )
    col1, col2 = st.columns(2)
    with col1:
        year = st.number_input(FIELD_LABELS["year"], min_value=1900, max_value=2100, value=2015, step=1)
        condition = st.number_input(FIELD_LABELS["condition"], min_value=0, max_value=5, value=3, step=1)
        cylinders = st.number_input(FIELD_LABELS["cylinders"], min_value=0, max_value=16, value=6, step=1)
        fuel = st.number_input(FIELD_LABELS["fuel"], min_value=0, max_value=4, value=1, step=1)
    with col2:
        odometer = st.number_input(FIELD_LABELS["odometer"], min_value=0, value=85000, step=1000)
        transmission = st.number_input(FIELD_LABELS["transmission"], min_value=0, max_value=2, value=1, step=1)
        drive = st.number_input(FIELD_LABELS["drive"], min_value=0, max_value=2, value=1, step=1)

    submitted = st.form_submit_button("Predict Price")

if submitted:
    form = {
        "model": model_name or "",
        "condition": condition,
        "cylinders": cylinders,
        "fuel": fuel,
        "odometer": odometer,
        "transmission": transmission,
        "drive": drive,
        "year": year,
    }
    try:
        with st.spinner("Calculating..."):
            vector = predictor.prepare(form)
            price = predictor.predict_vector(vector)
        st.markdown(f"<h1 style='margin:0'>{format_price(price)}</h1>", unsafe_allow_html=True)
        st.caption("Estimated price")
        with st.expander("Show features"):
            st.json(describe(vector))
    except InvalidInputError as e:
        st.error(f"Please check {FIELD_LABELS.get(e.field, e.field)}: {e}")
    except InferenceFailure as e:
        st.error(f"Prediction failed. System reported: {e}")

st.markdown("---")

"""
Bedtime recommendation from a pre-trained sleep regression model.

The model was fitted on three features:
  wake            desired wake-up time, seconds since midnight
  estimatedSleep  how much sleep the user wants, in hours
  coffee          daily coffee intake, in cups
and predicts `actualSleep`, the sleep the user really needs, in seconds.
The recommended bedtime is the wake time minus that prediction.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Any, Dict, Optional

import joblib
import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, field_validator
from sklearn.base import BaseEstimator
from sklearn.exceptions import NotFittedError
from sklearn.utils.validation import check_is_fitted

logger = logging.getLogger(__name__)

# -----------------------------
# 1) Constants
# -----------------------------
FEATURE_COLUMNS = ["wake", "estimatedSleep", "coffee"]

DEFAULT_WAKE_TIME = time(7, 0)
DEFAULT_SLEEP_AMOUNT = 8.0
DEFAULT_COFFEE_AMOUNT = 1

MIN_SLEEP, MAX_SLEEP, SLEEP_STEP = 4.0, 12.0, 0.25
MIN_COFFEE, MAX_COFFEE = 1, 20

# longest usable sleep prediction, seconds
MAX_PREDICTED_SLEEP = 24 * 60 * 60

ALERT_TITLE = "Your ideal bedtime is…"
ERROR_TITLE = "Error"
ERROR_MESSAGE = "Sorry, there was a problem calculating your bedtime."
UNKNOWN_BEDTIME = "???"


# -----------------------------
# 2) Errors
# -----------------------------
class ModelError(Exception):
    """
    Raised when the sleep model cannot be loaded or fails to predict.

    The only failure class at the model boundary. Callers
    show `user_message` and never a partial result.
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = ERROR_MESSAGE

        log_data = {"operation": operation, "error_context": self.context}
        if cause:
            log_data["cause"] = str(cause)
            logger.error(f"{self.__class__.__name__}: {message}", extra=log_data, exc_info=cause)
        else:
            logger.error(f"{self.__class__.__name__}: {message}", extra=log_data)


PredictionFailure = ModelError


# -----------------------------
# 3) Inputs
# -----------------------------
class SleepInputs(BaseModel):
    """The three values the form collects."""

    model_config = ConfigDict(frozen=True)

    wake_time: time = DEFAULT_WAKE_TIME
    sleep_amount: float = Field(DEFAULT_SLEEP_AMOUNT, ge=MIN_SLEEP, le=MAX_SLEEP, multiple_of=SLEEP_STEP)
    coffee_amount: int = Field(DEFAULT_COFFEE_AMOUNT, ge=MIN_COFFEE, le=MAX_COFFEE, strict=True)

    @field_validator("wake_time")
    @classmethod
    def hour_and_minute_only(cls, v: time) -> time:
        return v.replace(second=0, microsecond=0, tzinfo=None)


# -----------------------------
# 4) Feature encoding
# -----------------------------
def wake_seconds(wake_time: time) -> int:
    """Seconds since midnight, from the hour and minute only.

    >>> wake_seconds(time(7, 30))
    27000
    """
    return wake_time.hour * 60 * 60 + wake_time.minute * 60


def encode_features(inputs: SleepInputs) -> pd.DataFrame:
    return pd.DataFrame([{
        "wake": wake_seconds(inputs.wake_time),
        "estimatedSleep": float(inputs.sleep_amount),
        "coffee": int(inputs.coffee_amount),
    }], columns=FEATURE_COLUMNS)


# -----------------------------
# 5) Predictor
# -----------------------------
class Predictor:
    """Fixed, pre-trained regression model: inputs -> needed sleep in seconds."""

    def __init__(self, model, columns=None):
        self.model = model
        self.columns = list(columns) if columns else list(FEATURE_COLUMNS)

    def predict(self, inputs: SleepInputs) -> float:
        features = encode_features(inputs)
        try:
            raw = self.model.predict(features[self.columns])
            values = np.ravel(np.asarray(raw, dtype=float))
        except Exception as e:
            raise ModelError("Prediction call failed", operation="predict",
                             context={"columns": self.columns}, cause=e) from e

        if values.size == 0:
            raise ModelError("Model returned no prediction", operation="predict")
        seconds = float(values[0])
        if not np.isfinite(seconds) or not 0 <= seconds <= MAX_PREDICTED_SLEEP:
            raise ModelError(f"Model returned an invalid sleep duration: {seconds!r}",
                             operation="predict")

        logger.debug(f"Predicted {seconds:.0f}s of sleep for {features.iloc[0].to_dict()}")
        return seconds


def load_predictor(path) -> Predictor:
    path = Path(path)
    if not path.is_file():
        raise ModelError(f"Model file not found: {path}", operation="load_model")

    try:
        artefact = joblib.load(path)
    except Exception as e:
        raise ModelError(f"Could not load model from {path}", operation="load_model", cause=e) from e

    if isinstance(artefact, dict):
        model = artefact.get("model")
        columns = artefact.get("columns")
    else:
        model, columns = artefact, None

    if model is None or not callable(getattr(model, "predict", None)):
        raise ModelError(f"{path} does not contain a regression model", operation="load_model",
                         context={"artefact_type": type(artefact).__name__})

    if isinstance(model, BaseEstimator):
        try:
            check_is_fitted(model)
        except NotFittedError as e:
            raise ModelError(f"Model in {path} has not been fitted", operation="load_model", cause=e) from e

    logger.info(f"Loaded sleep model {type(model).__name__} from {path}")
    return Predictor(model, columns)


# -----------------------------
# 6) Bedtime calculation
# -----------------------------
def calculate_bedtime(wake_time: time, predicted_seconds: float, day: Optional[date] = None) -> datetime:
    """Wake time on `day` (today by default) minus the predicted sleep."""
    wake = datetime.combine(day or date.today(), wake_time)
    return wake - timedelta(seconds=predicted_seconds)


def recommend_bedtime(predictor: Predictor, inputs: SleepInputs, day: Optional[date] = None) -> datetime:
    seconds = predictor.predict(inputs)
    try:
        return calculate_bedtime(inputs.wake_time, seconds, day=day)
    except OverflowError as e:
        raise ModelError(f"Sleep duration {seconds!r}s is out of range", operation="calculate", cause=e) from e


# -----------------------------
# 7) Display
# -----------------------------
def format_bedtime(bedtime: datetime) -> str:
    """Short time, e.g. '10:45 PM'."""
    return bedtime.strftime("%I:%M %p").lstrip("0")


def format_sleep_amount(hours: float) -> str:
    return f"{hours:g} hours"


def format_coffee(cups: int) -> str:
    return "1 cup" if cups == 1 else f"{cups} cups"


@dataclass(frozen=True)
class Alert:
    title: str
    message: str
    ok: bool


def bedtime_alert(predictor: Optional[Predictor], inputs: SleepInputs, day: Optional[date] = None) -> Alert:
    """Result of the Calculate button. `predictor` is None when the model failed to load."""
    if predictor is None:
        return Alert(ERROR_TITLE, ERROR_MESSAGE, ok=False)
    try:
        bedtime = recommend_bedtime(predictor, inputs, day=day)
    except ModelError as e:
        return Alert(ERROR_TITLE, e.user_message, ok=False)
    return Alert(ALERT_TITLE, format_bedtime(bedtime), ok=True)


def bedtime_label(predictor: Optional[Predictor], inputs: SleepInputs) -> str:
    alert = bedtime_alert(predictor, inputs)
    return alert.message if alert.ok else UNKNOWN_BEDTIME
